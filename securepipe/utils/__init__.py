from .random_gen import SecureRandom
from .framing    import read_exact, write_all, KEY_SIZE, NONCE_SIZE, OVERHEAD
from .transport  import SocketTransport

__all__ = ["SecureRandom", "SocketTransport",
           "read_exact", "write_all",
           "KEY_SIZE", "NONCE_SIZE", "OVERHEAD"]
