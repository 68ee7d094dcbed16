"""ECS cluster, its load balancer and the security groups around them"""
from functools import reduce

import pulumi

from fargate.components.service import Service
from fargate.errors import ConfigurationError
from fargate.resource import NamePostFix, Resource, logical_id

IDLE_TIMEOUT_SECONDS = 30
ALL_PROTOCOLS = -1
ANYWHERE = '0.0.0.0/0'


class Cluster(Resource):
    def __init__(self, stage, options, vpc, tags=None):
        if not options.get('cluster_name'):
            raise ConfigurationError('cluster_name is required')
        super().__init__(options, stage, f'ECS{logical_id(options["cluster_name"])}', tags)
        self.vpc = vpc
        self.services = tuple(
            Service(self.stage, service_options, self, tags)
            for service_options in options.get('services', [])
        )
        seen = {}
        for service in self.services:
            name = service.get_name(NamePostFix.SERVICE)
            if name in seen:
                raise ConfigurationError(
                    f'services {seen[name]!r} and {service.options["name"]!r} both resolve to {name}'
                )
            seen[name] = service.options['name']

    def get_execution_role_arn(self):
        return self.options.get('execution_role_arn')

    def get_outputs(self):
        outputs = {}
        for service in self.services:
            outputs.update(service.get_outputs())
        return outputs

    def get_vpc(self):
        return self.vpc

    def is_public(self):
        return self.options.get('public', False)

    def generate(self):
        resources = {
            self.get_name(NamePostFix.CLUSTER): self.define('AWS::ECS::Cluster', self.tagged({})),
            **self.get_cluster_security_groups(),
            self.get_name(NamePostFix.LOAD_BALANCER): self.define(
                'AWS::ElasticLoadBalancingV2::LoadBalancer', self.tagged({
                    'Scheme': 'internet-facing' if self.is_public() else 'internal',
                    'LoadBalancerAttributes': [
                        {
                            'Key': 'idle_timeout.timeout_seconds',
                            'Value': str(IDLE_TIMEOUT_SECONDS),
                        }
                    ],
                    'Subnets': self.get_vpc().get_subnets(),
                    'SecurityGroups': self.get_elb_security_groups(),
                })),
        }
        for service in self.services:
            resources.update(service.generate())

        pulumi.log.debug(f'cluster {self.get_name(NamePostFix.CLUSTER)}: {len(resources)} resources')
        return resources

    # Security groups

    def get_elb_security_groups(self):
        if self.get_vpc().use_existing_vpc():
            return self.get_vpc().get_security_groups()
        if not self.is_public():
            return []
        return [{'Ref': self.get_security_group_name_by_service(service)} for service in self.services]

    def get_cluster_security_groups(self):
        # groups of an existing vpc are owned outside this stack, only referenced
        if self.get_vpc().use_existing_vpc():
            return {}

        container_group = self.get_name(NamePostFix.CONTAINER_SECURITY_GROUP)
        return {
            container_group: self.define('AWS::EC2::SecurityGroup', self.tagged({
                'GroupDescription': 'Access to the Fargate containers',
                'VpcId': self.get_vpc().get_ref_name(),
            })),
            self.get_name(NamePostFix.SECURITY_GROUP_INGRESS_SELF): self.define(
                'AWS::EC2::SecurityGroupIngress', {
                    'Description': 'Ingress from other containers in the same security group',
                    'GroupId': {'Ref': container_group},
                    'IpProtocol': ALL_PROTOCOLS,
                    'SourceSecurityGroupId': {'Ref': container_group},
                }),
            **self.generate_services_security_groups(),
        }

    def get_security_group_name_by_service(self, service):
        return self.get_name(NamePostFix.LOAD_BALANCER_SECURITY_GROUP) + service.get_name(NamePostFix.SERVICE)

    def get_alb_ingress_name_by_service(self, service):
        return self.get_name(NamePostFix.SECURITY_GROUP_INGRESS_ALB) + service.get_name(NamePostFix.SERVICE)

    def generate_services_security_groups(self):
        return reduce(
            lambda groups, service: {**groups, **self.generate_security_groups_by_service(service)},
            self.services,
            {},
        )

    def generate_security_groups_by_service(self, service):
        if not self.is_public():
            # TODO: private services in a new vpc get no load balancer group, decide whether
            # the container group should be attached to the internal load balancer instead
            pulumi.log.warn(
                f'{service.get_name(NamePostFix.SERVICE)} is private in a new vpc, '
                'no load balancer security group is created for it'
            )
            return {}

        service_name = service.get_name(NamePostFix.SERVICE)
        elb_service_group = self.get_security_group_name_by_service(service)
        return {
            elb_service_group: self.define('AWS::EC2::SecurityGroup', self.tagged({
                'GroupDescription': f'Access to the public facing load balancer - task {service_name}',
                'VpcId': self.get_vpc().get_ref_name(),
                'SecurityGroupIngress': [
                    {
                        'CidrIp': ANYWHERE,
                        'IpProtocol': 'tcp',
                        'FromPort': service.port,
                        'ToPort': service.port,
                    }
                ],
            })),
            self.get_alb_ingress_name_by_service(service): self.define(
                'AWS::EC2::SecurityGroupIngress', {
                    'Description': f'Ingress from the ALB - task {service_name}',
                    'GroupId': {'Ref': self.get_name(NamePostFix.CONTAINER_SECURITY_GROUP)},
                    'IpProtocol': ALL_PROTOCOLS,
                    'SourceSecurityGroupId': {'Ref': elb_service_group},
                }),
        }
