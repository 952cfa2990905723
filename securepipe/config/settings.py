class Settings:
    """Centralised application configuration."""

    # ── application ──────────────────────────────────────────────
    APP_NAME    = "SecurePipe"
    APP_VERSION = "1.0.0"

    # ── network ──────────────────────────────────────────────────
    LISTEN_HOST          = ""           # all interfaces
    CONNECT_HOST         = "localhost"
    LISTEN_BACKLOG       = 50
    ACCEPT_POLL_INTERVAL = 1.0          # seconds, lets stop() be noticed
    BUFFER_SIZE          = 2048         # server-side read capacity

    # ── crypto constants (NaCl box) ──────────────────────────────
    KEY_SIZE   = 32                     # Curve25519 public / private key
    NONCE_SIZE = 24                     # XSalsa20 nonce
    OVERHEAD   = 16                     # Poly1305 tag

    # ── session ──────────────────────────────────────────────────
    HANDSHAKE_TIMEOUT = 30              # seconds, None disables
    ECHO_EXCHANGES    = 1               # None = echo until peer hangs up

    # ── logging ──────────────────────────────────────────────────
    LOG_LEVEL  = "INFO"
    LOG_FORMAT = "[%(asctime)s] [%(levelname)-8s] %(name)s — %(message)s"
    LOG_DATEFMT = "%H:%M:%S"
