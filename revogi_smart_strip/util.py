#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Simple utility functions used by this package
"""

from __future__ import annotations

import netifaces
import socket
from ipaddress import IPv4Address

from revogi_smart_strip.internal_types import *

def get_local_broadcast_addresses_and_interfaces(include_loopback: bool=False) -> List[Tuple[str, str]]:
    """Returns a list of Tuple[broadcast_address: str, interface_name: str] for every IPv4 interface
       of the local host that advertises a broadcast address. Each broadcast address appears at most once.
       The result is sorted in a way that attempts to place the "preferred" network first in the list,
       according to the following scheme:
           1. Networks on the default gateway interface precede all other networks.
           2. Non-loopback networks precede loopback networks.
           3. Networks whose interface address begins with 172. follow other networks. This is a hack to
              deprioritize local docker networks.
    """
    result_with_priority: List[Tuple[int, int, str, str]] = []
    _, default_gateway_ifname = get_default_ip_gateway(socket.AF_INET)
    seq = 0
    for ifname in netifaces.interfaces():
        ifinfo = netifaces.ifaddresses(ifname)
        for addrinfo in ifinfo.get(netifaces.AF_INET, []):
            broadcast_str = addrinfo.get('broadcast')
            ip_str = addrinfo.get('addr')
            if not isinstance(broadcast_str, str) or not isinstance(ip_str, str):
                continue
            if ifname == default_gateway_ifname:
                priority = 0
            elif IPv4Address(ip_str).is_loopback:
                if not include_loopback:
                    continue
                priority = 3
            elif ip_str.startswith('172.'):
                priority = 2
            else:
                priority = 1
            # seq keeps interface enumeration order stable within a priority
            result_with_priority.append((priority, seq, broadcast_str, ifname))
            seq += 1

    result: List[Tuple[str, str]] = []
    seen: Set[str] = set()
    for _, _, broadcast_str, ifname in sorted(result_with_priority):
        if broadcast_str not in seen:
            seen.add(broadcast_str)
            result.append((broadcast_str, ifname))
    return result

def get_local_broadcast_addresses(include_loopback: bool=False) -> List[str]:
    """Returns a List[broadcast_address: str] for the IPv4 networks of the local host, in the order
       described by get_local_broadcast_addresses_and_interfaces()."""
    return [ bcast for bcast, _ in get_local_broadcast_addresses_and_interfaces(include_loopback=include_loopback)]

def get_default_ip_gateway(address_family: socket.AddressFamily | int=socket.AF_INET) -> Tuple[Optional[str], Optional[str]]:
    """Returns the (gateway_ip_address: str, gateway_interface_name: str) for the default IP gateway in the
       requested family, if any.
       returns (None, None) if there is no default gateway in the requested family."""
    assert int(address_family) in (int(socket.AF_INET), int(socket.AF_INET6))
    netiface_family = netifaces.AF_INET if int(address_family) == int(socket.AF_INET) else netifaces.AF_INET6
    gws = netifaces.gateways()
    if "default" in gws:
        default_gateway_infos = gws["default"]
        if netiface_family in default_gateway_infos:
            gw_ip, gw_interface_name = default_gateway_infos[netiface_family][:2]
            return (gw_ip, gw_interface_name)
    return (None, None)

if __name__ == "__main__":
    for bcast, ifname in get_local_broadcast_addresses_and_interfaces():
        print(f"{ifname}: {bcast}")
