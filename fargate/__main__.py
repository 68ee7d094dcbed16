"""ECS Fargate clusters deployed as a CloudFormation stack"""
import json

import pulumi
from pulumi_aws import cloudformation

from fargate.template import build_template
from fargate.utils.autotag import register_auto_tags

config = pulumi.Config()
stage = config.get('stage') or pulumi.get_stack()
fargate_config = config.require_object('fargate')
protect_resources = config.get_bool('protect_resources') or False

# Automatically inject tags.
register_auto_tags({
    'source': 'pulumi',
    'pulumi:Project': pulumi.get_project(),
    'pulumi:Stack': pulumi.get_stack(),
    'stage': stage,
})

template = build_template(stage, fargate_config)
pulumi.log.info(f'submitting {len(template["Resources"])} resources for stage {stage}')

stack = cloudformation.Stack(
    f'fargate-{stage}',
    template_body=json.dumps(template),
    capabilities=['CAPABILITY_IAM'],
    opts=pulumi.ResourceOptions(protect=protect_resources),
)

pulumi.export('stack_outputs', stack.outputs)
pulumi.export('template_resources', sorted(template['Resources']))
