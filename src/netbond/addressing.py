# SPDX-License-Identifier: BSD-2-Clause

from typing import List, Optional, Protocol

from netaddr import IPNetwork
from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator

from netbond.errors import InvalidNetConfig
from netbond.fields import U32, IPAddressField, IPNetworkField, RouteDestination


class Dhcp4Options(BaseModel):
    model_config = ConfigDict(extra='forbid')

    enabled: StrictBool
    optional: Optional[StrictBool] = None
    route_metric: Optional[U32] = Field(default=None, alias='route-metric')


class Dhcp6Options(BaseModel):
    model_config = ConfigDict(extra='forbid')

    enabled: StrictBool
    optional: Optional[StrictBool] = None


# `dhcp4 = true` is shorthand for `dhcp4 = { enabled = true }`
Dhcp4Config = StrictBool | Dhcp4Options
Dhcp6Config = StrictBool | Dhcp6Options


class StaticConfig(BaseModel):
    model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

    addresses: List[IPNetworkField] = Field(min_length=1)


class Route(BaseModel):
    model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

    to: RouteDestination
    source: Optional[IPAddressField] = Field(default=None, alias='from')
    via: Optional[IPAddressField] = None
    route_metric: Optional[U32] = Field(default=None, alias='route-metric')

    @model_validator(mode='after')
    def check_family(self) -> 'Route':
        if not isinstance(self.to, IPNetwork) and self.via is None and self.source is None:
            raise ValueError("default route must set 'via' or 'from' to select an address family")
        for name, address in (('via', self.via), ('from', self.source)):
            if address is not None and address.version != self.family:
                raise ValueError(f"route '{name}' address family does not match the route")
        return self

    @property
    def family(self) -> int:
        if isinstance(self.to, IPNetwork):
            return self.to.version
        if self.via is not None:
            return self.via.version
        return self.source.version


class HasAddressing(Protocol):
    dhcp4: Optional[Dhcp4Config]
    dhcp6: Optional[Dhcp6Config]
    static4: Optional[StaticConfig]
    static6: Optional[StaticConfig]
    routes: Optional[List[Route]]


def validate_addressing(device: HasAddressing) -> None:
    if all(source is None for source in (device.dhcp4, device.dhcp6, device.static4, device.static6)):
        raise InvalidNetConfig("each interface must configure dhcp and/or static addresses")

    for name, static, version in (('static4', device.static4, 4), ('static6', device.static6, 6)):
        if static is not None and any(address.version != version for address in static.addresses):
            raise InvalidNetConfig(f"{name} may only contain IPv{version} addresses")

    if not device.routes:
        return

    if device.static4 is None and device.static6 is None:
        raise InvalidNetConfig("static routes must have static addresses configured")

    for route in device.routes:
        match route.family:
            case 4 if device.static4 is None:
                raise InvalidNetConfig("IPv4 routes require static4 addresses")
            case 6 if device.static6 is None:
                raise InvalidNetConfig("IPv6 routes require static6 addresses")
