import pytest


def miimon(frequency=100, updelay=200, downdelay=200):
    return {
        'miimon-frequency-ms': frequency,
        'miimon-updelay-ms': updelay,
        'miimon-downdelay-ms': downdelay,
    }


def arpmon(interval=500, validate='all', targets=('192.168.1.1',)):
    return {
        'arpmon-interval-ms': interval,
        'arpmon-validate': validate,
        'arpmon-targets': list(targets),
    }


@pytest.fixture
def bond_table():
    def make(**overrides):
        table = {
            'kind': 'bond',
            'mode': 'active-backup',
            'interfaces': ['eth0', 'eth1'],
            'dhcp4': True,
            'monitoring': miimon(),
        }
        table.update(overrides)
        return table
    return make
