import pulumi
import pytest

from fargate.vpc import VPC

STAGE = 'dev'


@pytest.fixture
def stage():
    return STAGE


@pytest.fixture
def tags():
    return {'team': 'core', 'cost-center': '42'}


@pytest.fixture
def new_vpc():
    return VPC(STAGE, {'cidr': '10.20.0.0/16', 'availability_zones': 2})


@pytest.fixture
def existing_vpc():
    return VPC(STAGE, {
        'existing': {
            'vpc_id': 'vpc-0a1b2c',
            'subnet_ids': ['subnet-1', 'subnet-2'],
            'security_group_ids': ['sg-existing-1', 'sg-existing-2'],
        },
    })


@pytest.fixture
def service_options():
    def make(name='web', port=8080, **kwargs):
        options = {'name': name, 'image': f'registry.example.com/{name}:1.0', **kwargs}
        if port is not None:
            options['port'] = port
        return options
    return make


@pytest.fixture
def warnings(monkeypatch):
    messages = []
    monkeypatch.setattr(pulumi.log, 'warn', lambda msg, *args, **kwargs: messages.append(msg))
    return messages
