"""
SecurePipe — command-line entry point.

    securepipe -l 8080            run the encrypted echo server
    securepipe 8080 "message"     send a message and print the echo
"""

import sys
import socket
import logging
import argparse

from securepipe.config.settings import Settings
from securepipe.errors          import SecurePipeError
from securepipe.traffic         import EchoServer, dial

logger = logging.getLogger("SecurePipe.Main")


def setup_logging(level: str = Settings.LOG_LEVEL):
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if root_logger.handlers:
        return
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        Settings.LOG_FORMAT, datefmt=Settings.LOG_DATEFMT,
    ))
    root_logger.addHandler(console_handler)


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="securepipe",
        description="Encrypted echo server and client.",
    )
    p.add_argument("-l", "--listen", type=int, metavar="PORT",
                   help="listen mode: run the echo server on PORT")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="debug logging")
    p.add_argument("port", nargs="?", type=int,
                   help="client mode: server port on localhost")
    p.add_argument("message", nargs="?",
                   help="client mode: message to send")
    args = p.parse_args(argv)
    if args.listen is None and (args.port is None or args.message is None):
        p.error("client mode needs PORT and MESSAGE (or use -l PORT)")
    return args


def run_server(port: int):
    server = EchoServer(port=port)
    listener = socket.create_server((Settings.LISTEN_HOST, port),
                                    backlog=Settings.LISTEN_BACKLOG)
    try:
        server.serve(listener)
    except KeyboardInterrupt:
        logger.info("Shutting down…")
    finally:
        server.stop()


def run_client(port: int, message: str) -> str:
    payload = message.encode()
    with dial((Settings.CONNECT_HOST, port)) as channel:
        channel.write(payload)
        reply = channel.read(len(payload))
    return reply.decode(errors="replace")


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else Settings.LOG_LEVEL)
    logger.info("%s v%s", Settings.APP_NAME, Settings.APP_VERSION)

    try:
        if args.listen is not None:
            run_server(args.listen)
        else:
            print(run_client(args.port, args.message))
    except (SecurePipeError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
