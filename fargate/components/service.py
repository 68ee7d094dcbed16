"""Fargate task definition and ECS service, with its load balancer binding"""
import pulumi

from fargate.errors import ConfigurationError
from fargate.resource import NamePostFix, Resource, logical_id

DEFAULT_CPU = 256
DEFAULT_MEMORY = 512
DEFAULT_LOG_RETENTION_DAYS = 60
EXECUTION_ROLE_POLICY = 'arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy'


class Service(Resource):
    def __init__(self, stage, options, cluster, tags=None):
        for key in ('name', 'image'):
            if not options.get(key):
                raise ConfigurationError(f'service option {key} is required')
        super().__init__(options, stage, f'{cluster.name}{logical_id(options["name"])}', tags)
        self.cluster = cluster
        self.port = parse_port(options.get('port'), options['name'])
        if self.port is None and cluster.is_public():
            raise ConfigurationError(f'service {options["name"]} needs a port to be exposed publicly')

    def get_outputs(self):
        if self.port is None:
            return {}
        return {
            self.get_name(NamePostFix.ENDPOINT): {
                'Description': f'Endpoint of service {self.options["name"]}',
                'Value': {'Fn::Join': ['', [
                    'http://',
                    {'Fn::GetAtt': [self.cluster.get_name(NamePostFix.LOAD_BALANCER), 'DNSName']},
                    f':{self.port}',
                ]]},
            },
        }

    def generate(self):
        resources = {
            self.get_name(NamePostFix.LOG_GROUP): self.define('AWS::Logs::LogGroup', self.tagged({
                'LogGroupName': self.get_log_group_name(),
                'RetentionInDays': self.options.get('log_retention_days', DEFAULT_LOG_RETENTION_DAYS),
            })),
        }
        if self.cluster.get_execution_role_arn() is None:
            resources[self.get_name(NamePostFix.EXECUTION_ROLE)] = self.create_execution_role()
        resources[self.get_name(NamePostFix.TASK_DEFINITION)] = self.create_task_definition()
        if self.port is not None:
            resources.update(self.create_load_balancer_binding())
        resources[self.get_name(NamePostFix.SERVICE)] = self.create_service()

        pulumi.log.debug(f'service {self.get_name(NamePostFix.SERVICE)}: {len(resources)} resources')
        return resources

    def get_log_group_name(self):
        return f'/ecs/{self.name}{logical_id(self.stage)}'

    def get_execution_role(self):
        arn = self.cluster.get_execution_role_arn()
        if arn is not None:
            return arn
        return {'Fn::GetAtt': [self.get_name(NamePostFix.EXECUTION_ROLE), 'Arn']}

    def get_security_groups(self):
        vpc = self.cluster.get_vpc()
        if vpc.use_existing_vpc():
            return vpc.get_security_groups()
        return [{'Ref': self.cluster.get_name(NamePostFix.CONTAINER_SECURITY_GROUP)}]

    def create_execution_role(self):
        return self.define('AWS::IAM::Role', self.tagged({
            'AssumeRolePolicyDocument': {
                'Version': '2012-10-17',
                'Statement': [
                    {
                        'Effect': 'Allow',
                        'Principal': {'Service': 'ecs-tasks.amazonaws.com'},
                        'Action': 'sts:AssumeRole',
                    }
                ],
            },
            'ManagedPolicyArns': [EXECUTION_ROLE_POLICY],
        }))

    def create_task_definition(self):
        container = {
            'Name': self.name,
            'Image': self.options['image'],
            'Essential': True,
            'Environment': [
                {'Name': key, 'Value': str(value)}
                for key, value in self.options.get('environment', {}).items()
            ],
            'LogConfiguration': {
                'LogDriver': 'awslogs',
                'Options': {
                    'awslogs-group': self.get_log_group_name(),
                    'awslogs-region': {'Ref': 'AWS::Region'},
                    'awslogs-stream-prefix': self.name,
                },
            },
        }
        if self.port is not None:
            container['PortMappings'] = [{'ContainerPort': self.port}]

        return self.define('AWS::ECS::TaskDefinition', self.tagged({
            'Family': self.name,
            'Cpu': str(self.options.get('cpu', DEFAULT_CPU)),
            'Memory': str(self.options.get('memory', DEFAULT_MEMORY)),
            'NetworkMode': 'awsvpc',
            'RequiresCompatibilities': ['FARGATE'],
            'ExecutionRoleArn': self.get_execution_role(),
            'ContainerDefinitions': [container],
        }))

    def create_load_balancer_binding(self):
        target_group = self.get_name(NamePostFix.TARGET_GROUP)
        return {
            target_group: self.define('AWS::ElasticLoadBalancingV2::TargetGroup', self.tagged({
                'HealthCheckPath': self.options.get('health_check_path', '/'),
                'Port': self.port,
                'Protocol': 'HTTP',
                'TargetType': 'ip',
                'VpcId': self.cluster.get_vpc().get_ref_name(),
            })),
            self.get_name(NamePostFix.LOAD_BALANCER_LISTENER): self.define(
                'AWS::ElasticLoadBalancingV2::Listener', {
                    'DefaultActions': [
                        {
                            'Type': 'forward',
                            'TargetGroupArn': {'Ref': target_group},
                        }
                    ],
                    'LoadBalancerArn': {'Ref': self.cluster.get_name(NamePostFix.LOAD_BALANCER)},
                    'Port': self.port,
                    'Protocol': 'HTTP',
                }),
        }

    def create_service(self):
        properties = {
            'Cluster': {'Ref': self.cluster.get_name(NamePostFix.CLUSTER)},
            'LaunchType': 'FARGATE',
            'DesiredCount': self.options.get('desired_count', 1),
            'TaskDefinition': {'Ref': self.get_name(NamePostFix.TASK_DEFINITION)},
            'NetworkConfiguration': {
                'AwsvpcConfiguration': {
                    'AssignPublicIp': 'ENABLED' if self.cluster.is_public() else 'DISABLED',
                    'SecurityGroups': self.get_security_groups(),
                    'Subnets': self.cluster.get_vpc().get_subnets(),
                },
            },
        }
        if self.port is None:
            return self.define('AWS::ECS::Service', self.tagged(properties))

        properties['LoadBalancers'] = [
            {
                'ContainerName': self.name,
                'ContainerPort': self.port,
                'TargetGroupArn': {'Ref': self.get_name(NamePostFix.TARGET_GROUP)},
            }
        ]
        return self.define(
            'AWS::ECS::Service', self.tagged(properties),
            DependsOn=self.get_name(NamePostFix.LOAD_BALANCER_LISTENER),
        )


def parse_port(value, service_name):
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f'service {service_name} port must be an integer')
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f'service {service_name} port must be an integer') from e
    if not 0 < port < 65536:
        raise ConfigurationError(f'service {service_name} port {port} is out of range')
    return port
