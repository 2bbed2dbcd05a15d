# SPDX-License-Identifier: BSD-2-Clause

from typing import Annotated, Union

from netaddr import AddrFormatError, IPAddress, IPNetwork
from pydantic import Field, PlainSerializer, PlainValidator, StrictInt

U32_MAX = 2 ** 32 - 1


def parse_ip_address(value) -> IPAddress:
    if isinstance(value, IPAddress):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected an IP address string, got {type(value).__name__}")
    try:
        return IPAddress(value)
    except (AddrFormatError, ValueError) as e:
        raise ValueError(f"'{value}' is not a valid IP address") from e


def parse_ip_network(value) -> IPNetwork:
    if isinstance(value, IPNetwork):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected a CIDR string, got {type(value).__name__}")
    if value != value.strip():
        raise ValueError(f"'{value}' has surrounding whitespace")
    if '/' not in value:
        raise ValueError(f"'{value}' is missing a prefix length")
    try:
        return IPNetwork(value)
    except (AddrFormatError, ValueError) as e:
        raise ValueError(f"'{value}' is not a valid CIDR") from e


U32 = Annotated[StrictInt, Field(ge=0, le=U32_MAX)]
IPAddressField = Annotated[IPAddress, PlainValidator(parse_ip_address), PlainSerializer(str, return_type=str)]
IPNetworkField = Annotated[IPNetwork, PlainValidator(parse_ip_network), PlainSerializer(str, return_type=str)]


def parse_route_destination(value):
    if value == 'default':
        return value
    return parse_ip_network(value)


# Either the literal "default" or a destination network
RouteDestination = Annotated[Union[str, IPNetwork], PlainValidator(parse_route_destination),
                             PlainSerializer(str, return_type=str)]
