import pytest
import toml

from netbond.config import ArpMonConfig, MiiMonConfig
from netbond.errors import ConfigParseError, InvalidNetConfig
from netbond.netconfig import NetConfig

NET_CONFIG = """
version = 2

[bond0]
kind = "bond"
mode = "active-backup"
interfaces = ["eth0", "eth1"]
min-links = 1
primary = true
dhcp4 = true

[bond0.monitoring]
miimon-frequency-ms = 100
miimon-updelay-ms = 200
miimon-downdelay-ms = 200

[bond1]
kind = "bond"
mode = "active-backup"
interfaces = ["eth2", "eth3"]

[bond1.static4]
addresses = ["10.0.0.10/24"]

[bond1.monitoring]
arpmon-interval-ms = 200
arpmon-validate = "backup"
arpmon-targets = ["10.0.0.1"]
"""


def document(bond0=None, bond1=None, **top):
    raw = toml.loads(NET_CONFIG)
    raw['bond0'].update(bond0 or {})
    raw['bond1'].update(bond1 or {})
    raw.update(top)
    return raw


class TestNetConfigParsing:
    def test_devices(self):
        config = NetConfig.from_toml(NET_CONFIG)
        assert config.version == 2
        assert list(config.devices) == ['bond0', 'bond1']
        assert isinstance(config.devices['bond0'].monitoring_config, MiiMonConfig)
        assert isinstance(config.devices['bond1'].monitoring_config, ArpMonConfig)
        config.validate_config()

    def test_round_trip(self):
        config = NetConfig.from_toml(NET_CONFIG)
        assert NetConfig.from_toml(config.to_toml()) == config

    def test_missing_version(self):
        with pytest.raises(ConfigParseError, match='version'):
            NetConfig.from_toml(NET_CONFIG.replace('version = 2', ''))

    @pytest.mark.parametrize('version', ['1', '3', '"2"'])
    def test_unsupported_version(self, version):
        with pytest.raises(ConfigParseError, match='version'):
            NetConfig.from_toml(NET_CONFIG.replace('version = 2', f'version = {version}'))

    def test_version_message(self):
        with pytest.raises(ConfigParseError, match='unsupported network config version 1'):
            NetConfig.from_toml(NET_CONFIG.replace('version = 2', 'version = 1'))

    def test_non_bond_device(self):
        raw = document(bond1={'kind': 'interface'})
        with pytest.raises(ConfigParseError, match="kind of 'interface' does not match 'bond'"):
            NetConfig.from_document(raw)

    def test_invalid_device_name(self):
        raw = document()
        raw['bond/2'] = raw.pop('bond1')
        with pytest.raises(ConfigParseError, match='invalid character'):
            NetConfig.from_document(raw)

    def test_device_must_be_table(self):
        with pytest.raises(ConfigParseError, match='expected a table'):
            NetConfig.from_document(document(eth0=5))

    def test_no_devices(self):
        config = NetConfig.from_toml('version = 2\n')
        assert config.devices == {}
        config.validate_config()


class TestNetConfigValidation:
    def test_bond_error_names_device(self):
        config = NetConfig.from_document(document(bond1={'min-links': 3}))
        with pytest.raises(InvalidNetConfig, match='^bond1: min-links is greater than number of interfaces'):
            config.validate_config()

    def test_duplicate_member(self):
        config = NetConfig.from_document(document(bond0={'interfaces': ['eth0', 'eth0']}))
        with pytest.raises(InvalidNetConfig, match='bond0: bonds must not list the same interface more than once'):
            config.validate_config()

    def test_member_of_itself(self):
        config = NetConfig.from_document(document(bond0={'interfaces': ['eth0', 'bond0']}))
        with pytest.raises(InvalidNetConfig, match='bond0: bond cannot be a member of itself'):
            config.validate_config()

    def test_shared_member(self):
        config = NetConfig.from_document(document(bond1={'interfaces': ['eth1', 'eth2']}))
        with pytest.raises(InvalidNetConfig, match="interface 'eth1' is a member of more than one bond"):
            config.validate_config()

    def test_multiple_primary(self):
        config = NetConfig.from_document(document(bond1={'primary': True}))
        with pytest.raises(InvalidNetConfig, match='multiple primary interfaces defined, expected 1'):
            config.validate_config()

    def test_first_failing_bond_reported(self):
        config = NetConfig.from_document(document(bond0={'interfaces': []}, bond1={'min-links': 3}))
        with pytest.raises(InvalidNetConfig, match='^bond0: bonds must have 1 or more interfaces'):
            config.validate_config()
