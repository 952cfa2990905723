"""
SecurePipe core: stream capability interfaces and the crypto engine.
"""
