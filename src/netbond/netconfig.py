# SPDX-License-Identifier: BSD-2-Clause

import logging
from typing import Dict

import toml
from pydantic import BaseModel, ConfigDict, StrictInt, field_validator

from netbond.config import BondConfig, Validate, load_model, parse_toml
from netbond.errors import ConfigParseError, InvalidNetConfig
from netbond.interface_name import InterfaceName

# Bonds were introduced in version 2 of the network config
SUPPORTED_VERSIONS = (2,)


class NetConfig(BaseModel, Validate):
    model_config = ConfigDict(extra='forbid')

    version: StrictInt
    devices: Dict[InterfaceName, BondConfig]

    @field_validator('version')
    @classmethod
    def check_version(cls, version: int) -> int:
        if version not in SUPPORTED_VERSIONS:
            raise ValueError(f"unsupported network config version {version}")
        return version

    @classmethod
    def from_document(cls, document: dict) -> 'NetConfig':
        """
        Build a NetConfig from a parsed network config document.

        Every top-level key other than `version` is a device name whose table
        describes that device.
        """
        if 'version' not in document:
            raise ConfigParseError("version: Field required")
        devices = {name: table for name, table in document.items() if name != 'version'}
        for name, table in devices.items():
            if not isinstance(table, dict):
                raise ConfigParseError(f"{name}: expected a table describing the device")
        return load_model(cls, {'version': document['version'], 'devices': devices})

    @classmethod
    def from_toml(cls, text: str) -> 'NetConfig':
        return cls.from_document(parse_toml(text))

    def to_toml(self) -> str:
        document = {'version': self.version}
        for name, bond in self.devices.items():
            document[name] = bond.to_dict()
        return toml.dumps(document)

    def validate_config(self) -> None:
        owners: Dict[str, str] = {}
        primaries = []

        for name, bond in self.devices.items():
            try:
                bond.validate_config()
                check_members(name, bond)
            except InvalidNetConfig as e:
                raise InvalidNetConfig(f"{name}: {e.reason}") from e

            for member in bond.interfaces:
                if member in owners:
                    raise InvalidNetConfig(f"interface '{member}' is a member of more than one bond")
                owners[member] = name

            if bond.primary:
                primaries.append(name)

            logging.debug(f"Bond '{name}' is valid ({len(bond.interfaces)} interfaces)")

        if len(primaries) > 1:
            raise InvalidNetConfig("multiple primary interfaces defined, expected 1")


def check_members(name: str, bond: BondConfig) -> None:
    if len(set(bond.interfaces)) != len(bond.interfaces):
        raise InvalidNetConfig("bonds must not list the same interface more than once")
    if name in bond.interfaces:
        raise InvalidNetConfig("bond cannot be a member of itself")
