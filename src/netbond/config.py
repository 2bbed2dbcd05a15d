# SPDX-License-Identifier: BSD-2-Clause

from abc import ABC, abstractmethod
from enum import Enum
from typing import Annotated, List, Optional, TypeVar, Union

import toml
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError, model_validator

from netbond.addressing import Dhcp4Config, Dhcp6Config, Route, StaticConfig, validate_addressing
from netbond.errors import ConfigParseError, InvalidNetConfig
from netbond.fields import U32, IPAddressField
from netbond.interface_name import InterfaceName

# The kernel refuses more arp_ip_target entries than this
MAX_ARP_TARGETS = 16

M = TypeVar('M', bound=BaseModel)


def format_validation_error(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        location = '.'.join(str(part) for part in detail['loc'])
        messages.append(f"{location}: {detail['msg']}" if location else detail['msg'])
    return '; '.join(messages)


def parse_toml(text: str) -> dict:
    try:
        return toml.loads(text)
    except toml.TomlDecodeError as e:
        raise ConfigParseError(f"invalid TOML: {e}") from e


def load_model(model: type[M], data: dict) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(format_validation_error(e)) from e


class Validate(ABC):
    @abstractmethod
    def validate_config(self) -> None:
        """Raise InvalidNetConfig for the first rule the parsed value breaks."""


class ArpValidate(str, Enum):
    ACTIVE = "active"
    ALL = "all"
    BACKUP = "backup"
    NONE = "none"


# Only mode 1 (active-backup) for now, modes 0-6 may follow
class BondMode(str, Enum):
    ACTIVE_BACKUP = "active-backup"


class MiiMonConfig(BaseModel, Validate):
    model_config = ConfigDict(extra='forbid')

    frequency: U32 = Field(alias='miimon-frequency-ms')
    updelay: U32 = Field(alias='miimon-updelay-ms')
    downdelay: U32 = Field(alias='miimon-downdelay-ms')

    def validate_config(self) -> None:
        if self.frequency == 0:
            raise InvalidNetConfig("miimon-frequency-ms of 0 disables Mii Monitoring, "
                                   "either set a value or configure Arp Monitoring")
        # The kernel rounds both delays down to a multiple of frequency
        if self.updelay < self.frequency or self.downdelay < self.frequency:
            raise InvalidNetConfig("miimon-updelay-ms and miimon-downdelay-ms must be "
                                   "equal to or larger than miimon-frequency-ms")


class ArpMonConfig(BaseModel, Validate):
    model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

    interval: U32 = Field(alias='arpmon-interval-ms')
    validation: ArpValidate = Field(alias='arpmon-validate')
    targets: List[IPAddressField] = Field(alias='arpmon-targets')

    def validate_config(self) -> None:
        if self.interval == 0:
            raise InvalidNetConfig("arpmon-interval-ms of 0 disables Arp Monitoring, "
                                   "either set a value or configure Mii Monitoring")
        if not 1 <= len(self.targets) <= MAX_ARP_TARGETS:
            raise InvalidNetConfig(f"arpmon-targets must include between 1 and {MAX_ARP_TARGETS} targets")


# Untagged: the field names decide, and extra='forbid' keeps the families apart
BondMonitoring = Annotated[Union[MiiMonConfig, ArpMonConfig], Field(union_mode='left_to_right')]


class BondConfig(BaseModel, Validate):
    model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

    primary: Optional[StrictBool] = None
    dhcp4: Optional[Dhcp4Config] = None
    dhcp6: Optional[Dhcp6Config] = None
    static4: Optional[StaticConfig] = None
    static6: Optional[StaticConfig] = None
    routes: Optional[List[Route]] = Field(default=None, alias='route')
    kind: StrictStr
    mode: BondMode
    min_links: Optional[Annotated[StrictInt, Field(ge=0)]] = Field(default=None, alias='min-links')
    monitoring_config: BondMonitoring = Field(alias='monitoring')
    interfaces: List[InterfaceName]

    @model_validator(mode='after')
    def check_kind(self) -> 'BondConfig':
        if self.kind.lower() != 'bond':
            raise ValueError(f"kind of '{self.kind}' does not match 'bond'")
        return self

    @classmethod
    def from_toml(cls, text: str) -> 'BondConfig':
        return load_model(cls, parse_toml(text))

    def to_dict(self) -> dict:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)

    def to_toml(self) -> str:
        return toml.dumps(self.to_dict())

    def validate_config(self) -> None:
        validate_addressing(self)

        if len(self.interfaces) == 0:
            raise InvalidNetConfig("bonds must have 1 or more interfaces specified")
        if self.min_links is not None and self.min_links > len(self.interfaces):
            raise InvalidNetConfig("min-links is greater than number of interfaces configured")

        match self.monitoring_config:
            case MiiMonConfig() | ArpMonConfig():
                self.monitoring_config.validate_config()
            case _:
                raise ValueError(f"Unexpected monitoring type: {type(self.monitoring_config)}")
