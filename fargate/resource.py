"""Naming and tagging shared by every resource synthesizer"""
import re
from enum import Enum

from fargate.errors import ConfigurationError

DELETION_POLICY = 'Delete'


class NamePostFix(Enum):
    CLUSTER = 'Cluster'
    LOAD_BALANCER = 'ALB'
    LOAD_BALANCER_SECURITY_GROUP = 'ALBSecurityGroup'
    LOAD_BALANCER_LISTENER = 'ALBListener'
    CONTAINER_SECURITY_GROUP = 'ContainerSecurityGroup'
    SECURITY_GROUP_INGRESS_SELF = 'ContainerSecurityGroupIngressSelf'
    SECURITY_GROUP_INGRESS_ALB = 'ContainerSecurityGroupIngressALB'
    SERVICE = 'Service'
    TASK_DEFINITION = 'TaskDefinition'
    TARGET_GROUP = 'TargetGroup'
    LOG_GROUP = 'LogGroup'
    EXECUTION_ROLE = 'ExecutionRole'
    ENDPOINT = 'Endpoint'
    VPC = 'VPC'
    INTERNET_GATEWAY = 'InternetGateway'
    GATEWAY_ATTACHMENT = 'GatewayAttachment'
    ROUTE_TABLE = 'RouteTable'
    ROUTE = 'Route'
    SUBNET = 'Subnet'
    SUBNET_ROUTE_TABLE_ASSOCIATION = 'SubnetRouteTableAssociation'


def logical_id(value):
    """Turn a free-form identifier into a CloudFormation logical id fragment.

    >>> logical_id('api-cluster')
    'ApiCluster'
    """
    parts = re.split(r'[^0-9A-Za-z]+', str(value))
    return ''.join(part[:1].upper() + part[1:] for part in parts if part)


def render_tags(tags):
    if tags is None:
        return None
    if isinstance(tags, dict):
        return [{'Key': key, 'Value': str(value)} for key, value in tags.items()]
    return [dict(tag) for tag in tags]


class Resource:
    """Base class for synthesizers that emit CloudFormation resources.

    ``name`` is the identity every generated logical id starts with, the
    stage is appended after the resource kind suffix.
    """

    def __init__(self, options, stage, name, tags=None):
        if not logical_id(name):
            raise ConfigurationError(f'{name!r} cannot be used as a resource name')
        self.options = options
        self.stage = stage
        self.name = logical_id(name)
        self.tags = render_tags(tags)

    def get_name(self, postfix):
        return f'{self.name}{postfix.value}{logical_id(self.stage)}'

    def get_tags(self):
        # fresh copy so callers never share tag dicts between resources
        return render_tags(self.tags)

    def tagged(self, properties):
        tags = self.get_tags()
        if tags:
            return {'Tags': tags, **properties}
        return properties

    def define(self, resource_type, properties, **extra):
        definition = {
            'Type': resource_type,
            'DeletionPolicy': DELETION_POLICY,
            'Properties': properties,
        }
        definition.update(extra)
        return definition
