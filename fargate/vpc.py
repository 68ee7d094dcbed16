"""VPC, subnets and route table the cluster is placed in"""
import ipaddress

import pulumi

from fargate.errors import ConfigurationError
from fargate.resource import NamePostFix, Resource

DEFAULT_CIDR = '10.0.0.0/16'
DEFAULT_AVAILABILITY_ZONES = 2


class VPC(Resource):
    def __init__(self, stage, options=None, tags=None):
        options = options or {}
        super().__init__(options, stage, 'Fargate', tags)
        self.existing = options.get('existing')
        if self.existing is not None:
            for key in ('vpc_id', 'subnet_ids'):
                if not self.existing.get(key):
                    raise ConfigurationError(f'existing vpc requires {key}')
            return

        self.vpc_cidr = options.get('cidr', DEFAULT_CIDR)
        try:
            network = ipaddress.ip_network(self.vpc_cidr)
        except ValueError as e:
            raise ConfigurationError(f'invalid vpc cidr {self.vpc_cidr!r}') from e
        if network.version != 4 or network.prefixlen > 16:
            raise ConfigurationError(f'vpc cidr {self.vpc_cidr} must be an IPv4 /16 or larger')
        self.vpc_cidr_octet_prefix = '.'.join(str(network.network_address).split('.')[:2])
        self.availability_zones = int(options.get('availability_zones', DEFAULT_AVAILABILITY_ZONES))
        if self.availability_zones < 1:
            raise ConfigurationError('availability_zones must be at least 1')

    def use_existing_vpc(self):
        return self.existing is not None

    def get_ref_name(self):
        if self.use_existing_vpc():
            return self.existing['vpc_id']
        return {'Ref': self.get_name(NamePostFix.VPC)}

    def get_subnets(self):
        if self.use_existing_vpc():
            return list(self.existing['subnet_ids'])
        return [{'Ref': self.get_subnet_name(az)} for az in range(self.availability_zones)]

    def get_security_groups(self):
        if not self.use_existing_vpc():
            raise ConfigurationError('security groups are only supplied by an existing vpc')
        return list(self.existing.get('security_group_ids', []))

    def get_subnet_name(self, az):
        return f'{self.get_name(NamePostFix.SUBNET)}{az}'

    def generate(self):
        if self.use_existing_vpc():
            pulumi.log.debug(f'using existing vpc {self.existing["vpc_id"]}')
            return {}

        vpc = self.get_name(NamePostFix.VPC)
        internet_gateway = self.get_name(NamePostFix.INTERNET_GATEWAY)
        gateway_attachment = self.get_name(NamePostFix.GATEWAY_ATTACHMENT)
        route_table = self.get_name(NamePostFix.ROUTE_TABLE)

        resources = {
            vpc: self.define('AWS::EC2::VPC', self.tagged({
                'CidrBlock': self.vpc_cidr,
                'InstanceTenancy': 'default',
                'EnableDnsHostnames': True,
                'EnableDnsSupport': True,
            })),
            internet_gateway: self.define('AWS::EC2::InternetGateway', self.tagged({})),
            gateway_attachment: self.define('AWS::EC2::VPCGatewayAttachment', {
                'InternetGatewayId': {'Ref': internet_gateway},
                'VpcId': {'Ref': vpc},
            }),
            route_table: self.define('AWS::EC2::RouteTable', self.tagged({
                'VpcId': {'Ref': vpc},
            })),
            self.get_name(NamePostFix.ROUTE): self.define('AWS::EC2::Route', {
                'DestinationCidrBlock': '0.0.0.0/0',
                'GatewayId': {'Ref': internet_gateway},
                'RouteTableId': {'Ref': route_table},
            }, DependsOn=gateway_attachment),
        }
        for az in range(self.availability_zones):
            resources.update(self.create_subnet(az, route_table))

        pulumi.log.debug(f'vpc {vpc} with {self.availability_zones} subnets')
        return resources

    def create_subnet(self, az, route_table):
        subnet = self.get_subnet_name(az)
        return {
            subnet: self.define('AWS::EC2::Subnet', self.tagged({
                'AvailabilityZone': {'Fn::Select': [az, {'Fn::GetAZs': ''}]},
                'CidrBlock': f'{self.vpc_cidr_octet_prefix}.{az}.0/24',
                'MapPublicIpOnLaunch': True,
                'VpcId': {'Ref': self.get_name(NamePostFix.VPC)},
            })),
            f'{self.get_name(NamePostFix.SUBNET_ROUTE_TABLE_ASSOCIATION)}{az}': self.define(
                'AWS::EC2::SubnetRouteTableAssociation', {
                    'SubnetId': {'Ref': subnet},
                    'RouteTableId': {'Ref': route_table},
                }),
        }
