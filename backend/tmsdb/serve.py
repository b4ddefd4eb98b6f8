# backend/tmsdb/serve.py
"""
Entry point for `python -m tmsdb.serve`.

Everything uvicorn needs comes from the environment; TLS is enabled only
when at least one SSL_* variable is set.
"""

import logging
import os
from typing import Any, Dict

import uvicorn

logger = logging.getLogger("tmsdb.serve")

_TRUTHY = {"1", "true", "yes", "on"}

_SSL_ENV = {
    "SSL_CERTFILE": "ssl_certfile",
    "SSL_KEYFILE": "ssl_keyfile",
    "SSL_CA_CERTS": "ssl_ca_certs",
    "SSL_KEYFILE_PASSWORD": "ssl_keyfile_password",
}


def _tls_options() -> Dict[str, str]:
    return {option: os.environ[var] for var, option in _SSL_ENV.items() if os.getenv(var)}


def server_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "8000")),
        "reload": os.getenv("RELOAD", "false").lower() in _TRUTHY,
        "log_level": os.getenv("LOG_LEVEL", "info"),
        "proxy_headers": True,
        "forwarded_allow_ips": os.getenv("FORWARDED_ALLOW_IPS", "*"),
    }
    options.update(_tls_options())
    return options


def main() -> None:
    options = server_options()
    logger.info(
        "Starting Training Management API",
        extra={"host": options["host"], "port": options["port"], "tls": "ssl_certfile" in options},
    )
    uvicorn.run("tmsdb.main:app", **options)


if __name__ == "__main__":
    main()
