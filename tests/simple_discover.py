#!/usr/bin/env python3

import logging
import asyncio
import revogi_smart_strip as revogi

#logging.basicConfig(level=logging.DEBUG)

async def amain():
    # DiscoveryService broadcasts on every local network; pass a BroadcastDispatcher to choose
    # the broadcast addresses or tune the retry settings.
    service = revogi.DiscoveryService()
    for device in await service.discover_smart_strips():
        print(device)

loop = asyncio.new_event_loop()
try:
    asyncio.set_event_loop(loop)
    loop.run_until_complete(amain())
finally:
    loop.close()
