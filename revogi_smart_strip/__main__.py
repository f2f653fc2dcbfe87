#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import json
import asyncio
import logging

from revogi_smart_strip.internal_types import *

from revogi_smart_strip import (
    __version__ as pkg_version,
    UdpTransport,
    BroadcastDispatcher,
    DiscoveryService,
    SwitchService,
    StatusService,
  )
from revogi_smart_strip.constants import (
    REVOGI_PORT,
    MAX_TIMEOUT_COUNT,
    TIMEOUT_BASE_VALUE,
    DEFAULT_RECEIVE_TIMEOUT,
  )

class CmdExitError(RuntimeError):
    exit_code: int

    def __init__(self, exit_code: int, msg: Optional[str]=None):
        if msg is None:
            msg = f"Command exited with return code {exit_code}"
        super().__init__(msg)
        self.exit_code = exit_code

class ArgparseExitError(CmdExitError):
    pass

class NoExitArgumentParser(argparse.ArgumentParser):
    def exit(self, status=0, message=None):
        if message:
            self._print_message(message, sys.stderr)
        raise ArgparseExitError(status, message)

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def _make_dispatcher(self) -> BroadcastDispatcher:
        transport = UdpTransport(
            port=self._args.port,
            max_timeout_count=self._args.max_timeout_count,
            timeout_base_value=self._args.timeout_base,
            receive_timeout=self._args.receive_timeout,
          )
        broadcast_addresses: Optional[List[str]] = self._args.broadcast_addresses
        if not broadcast_addresses is None and len(broadcast_addresses) == 0:
            broadcast_addresses = None
        return BroadcastDispatcher(transport=transport, broadcast_addresses=broadcast_addresses)

    async def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    async def cmd_discover(self) -> int:
        service = DiscoveryService(self._make_dispatcher())
        devices = await service.discover_smart_strips()
        results: List[JsonableDict] = [ device.raw_data for device in devices ]
        print(json.dumps(results, indent=2, sort_keys=True))
        return 0

    async def cmd_switch(self) -> int:
        service = SwitchService(self._make_dispatcher())
        response = await service.switch_port(self._args.serial_number, self._args.port_number, self._args.state)
        print(json.dumps(response.to_jsonable(), indent=2, sort_keys=True))
        return 0 if response.is_success else 1

    async def cmd_status(self) -> int:
        service = StatusService(self._make_dispatcher())
        status = await service.get_status(self._args.serial_number, self._args.ip_address)
        print(json.dumps(status.to_jsonable(), indent=2, sort_keys=True))
        return 0 if status.is_success else 1

    async def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    async def arun(self) -> int:
        """Run the revogi command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(description="Discover and control Revogi smart power strips.")


        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('--port', type=int, default=REVOGI_PORT,
                            help=f'''The UDP port the strips listen on. Default: {REVOGI_PORT}''')
        parser.add_argument('--max-timeout-count', dest='max_timeout_count', type=int, default=MAX_TIMEOUT_COUNT,
                            help=f'''The number of failed receive attempts before giving up on an address. Default: {MAX_TIMEOUT_COUNT}''')
        parser.add_argument('--timeout-base', dest='timeout_base', type=float, default=TIMEOUT_BASE_VALUE,
                            help=f'''Backoff base in seconds; the n-th failed receive is followed by n times this sleep. Default: {TIMEOUT_BASE_VALUE}''')
        parser.add_argument('--receive-timeout', dest='receive_timeout', type=float, default=DEFAULT_RECEIVE_TIMEOUT,
                            help=f'''The time in seconds a single receive attempt waits. Default: {DEFAULT_RECEIVE_TIMEOUT}''')
        parser.add_argument('-b', '--broadcast-address', dest="broadcast_addresses", action='append', default=[],
                            help='''A broadcast address to send to. May be repeated. Default: the broadcast addresses of all local interfaces.''')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')


        # ======================= discover

        parser_discover = subparsers.add_parser('discover', description="Discover smart strips on the local networks")
        parser_discover.set_defaults(func=self.cmd_discover)

        # ======================= switch

        parser_switch = subparsers.add_parser('switch', description="Turn a port of a smart strip on or off")
        parser_switch.add_argument('serial_number', help='The serial number of the smart strip')
        parser_switch.add_argument('port_number', type=int, help='The port to switch')
        parser_switch.add_argument('state', type=int, help='1 to turn the port on, 0 to turn it off')
        parser_switch.set_defaults(func=self.cmd_switch)

        # ======================= status

        parser_status = subparsers.add_parser('status', description="Query the port states of a smart strip")
        parser_status.add_argument('serial_number', help='The serial number of the smart strip')
        parser_status.add_argument('ip_address', help='The IP address of the smart strip')
        parser_status.set_defaults(func=self.cmd_status)

        # ======================= version

        parser_version = subparsers.add_parser('version',
                                description='''Display version information.''')
        parser_version.set_defaults(func=self.cmd_version)

        # =========================================================

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            func: Callable[[], Awaitable[int]] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = await func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"revogi: error: {ex}", file=sys.stderr)
        except BaseException as ex:
            print(f"revogi: Unhandled exception: {ex}", file=sys.stderr)
            raise

        return rc

    def run(self) -> int:
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            rc = loop.run_until_complete(self.arun())
        finally:
            loop.close()
        return rc

def run(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

async def arun(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = await CommandHandler(argv).arun()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
