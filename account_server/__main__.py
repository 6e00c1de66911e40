import argparse
import asyncio
import os
import signal

import firebase_admin
from firebase_admin import credentials
import tornado.web

from account_server.account_service import AccountService
from account_server.db import Db
from account_server.hasher import BcryptHasher
from account_server.logger import Logger
from account_server.registry import GameServerRegistry
from account_server.server_config import BootstrapAdminConfig, ServerConfig
from account_server.sessions import SessionManager
from account_server.tokens import FirebaseTokenAuthority

from account_server.handler.users import UsersHandler
from account_server.handler.user import UserHandler
from account_server.handler.password import PasswordHandler
from account_server.handler.colour import ColourHandler
from account_server.handler.logs import LogsHandler

def make_app(accounts: AccountService, debug: bool):
    settings = {
        "debug": debug,
        "autoreload": False,
    }
    handlers = [
        (r"/api/users", UsersHandler, dict(accounts=accounts)),
        (r"/api/users/([^/]+)", UserHandler, dict(accounts=accounts)),
        (r"/api/users/([^/]+)/password", PasswordHandler, dict(accounts=accounts)),
        (r"/api/users/([^/]+)/colour", ColourHandler, dict(accounts=accounts)),
        (r"/api/logs", LogsHandler, dict(accounts=accounts)),
    ]
    return tornado.web.Application(handlers, **settings)

def make_accounts(config: ServerConfig, debug: bool = False) -> AccountService:
    if config.firebaseCredentials:
        firebaseApp = firebase_admin.initialize_app(credentials.Certificate(config.firebaseCredentials))
    else:
        firebaseApp = firebase_admin.initialize_app()
    sessionManager = SessionManager()
    return AccountService(
            db = Db(dbPath = config.dbPath, debug = debug),
            hasher = BcryptHasher(rounds = config.bcryptRounds),
            tokenAuthority = FirebaseTokenAuthority(app = firebaseApp),
            registry = GameServerRegistry(sessionManager),
            sessionManager = sessionManager)

def bootstrap_admin(accounts: AccountService, bootstrap: BootstrapAdminConfig) -> bool:
    created = accounts.ensureAdmin(bootstrap.toAccountForm())
    if created and bootstrap.usesDefaultPassword:
        Logger.getDefault().warn("startup", -1,
                f"Bootstrap admin {bootstrap.name} has the built-in default password. Change it.")
    return created

def main():
    parser = argparse.ArgumentParser(description="Account server for the game lobby.")
    parser.add_argument('-d', '--debug', action="store_true")
    parser.add_argument('-v', '--verbosity', action="store", type=int, default=0)
    parser.add_argument('-p', '--port', action="store", type=int, default=4242)
    parser.add_argument('-c', '--config', action="store", type=str, default="server_config.json")
    parser.add_argument('--ssl_cert', action="store", type=str, default="localhost.crt")
    parser.add_argument('--ssl_key', action="store", type=str, default="localhost.key")
    args = parser.parse_args()

    if os.path.exists(args.config):
        config = ServerConfig.fromFile(args.config)
    else:
        config = ServerConfig()
    for path in (config.dbPath, config.logDbPath):
        if os.path.dirname(path):
            os.makedirs(os.path.dirname(path), exist_ok=True)
    logger = Logger(config.logDbPath, printVerbosity=args.verbosity, debug=args.debug)
    Logger.setDefault(logger)
    logger.info("startup", -1, f"Starting with options {args}.")
    if not os.path.exists(args.config):
        logger.warn("startup", -1, f"No config found at {args.config}. Using defaults.")

    accounts = make_accounts(config, debug=args.debug)
    bootstrap_admin(accounts, config.bootstrapAdmin)
    app = make_app(accounts, args.debug)
    useSsl = True
    if args.ssl_cert == "":
        logger.info("startup", -1, "No SSL certificate found. Running HTTP only.")
        useSsl = False
    if args.ssl_key == "":
        logger.info("startup", -1, "No SSL key found. Running HTTP only.")
        useSsl = False

    async def serve():
        if useSsl:
            sslContext = {
                "certfile": args.ssl_cert,
                "keyfile": args.ssl_key,
            }
            app.listen(args.port, ssl_options=sslContext)
            logger.info("startup", -1, f"Listening on port {args.port} (with SSL enabled) as PID {os.getpid()}.")
        else:
            app.listen(args.port)
            logger.info("startup", -1, f"Listening on port {args.port} (without SSL enabled) as PID {os.getpid()}.")
        logger.info("startup", -1, "Startup finished.")
        shutdownRequested = asyncio.Event()
        asyncio.get_running_loop().add_signal_handler(signal.SIGINT, shutdownRequested.set)
        await shutdownRequested.wait()
        logger.info("shutdown", -1, "Shutting down.")

    asyncio.run(serve())

if __name__ == "__main__":
    main()
