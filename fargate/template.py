"""Assemble the network and every cluster into one CloudFormation template"""
import pulumi

from fargate.components.cluster import Cluster
from fargate.errors import DuplicateResourceError
from fargate.vpc import VPC

TEMPLATE_FORMAT_VERSION = '2010-09-09'


def merge_fragments(*fragments):
    merged = {}
    for fragment in fragments:
        for name, definition in fragment.items():
            if name in merged:
                raise DuplicateResourceError(name)
            merged[name] = definition
    return merged


def build_template(stage, options, tags=None):
    """Synthesize the template for ``stage``.

    ``options`` is the ``fargate`` config object: ``vpc`` (network options),
    ``clusters`` (list of cluster options) and optionally ``tags``. Tags given
    as an argument take precedence over the ones in ``options``.
    """
    if tags is None:
        tags = options.get('tags')
    vpc = VPC(stage, options.get('vpc'), tags)
    clusters = [Cluster(stage, cluster_options, vpc, tags) for cluster_options in options.get('clusters', [])]

    resources = merge_fragments(vpc.generate(), *(cluster.generate() for cluster in clusters))
    outputs = {}
    for cluster in clusters:
        outputs.update(cluster.get_outputs())

    pulumi.log.debug(f'template for {stage}: {len(resources)} resources, {len(outputs)} outputs')
    return {
        'AWSTemplateFormatVersion': TEMPLATE_FORMAT_VERSION,
        'Description': f'Fargate clusters for stage {stage}',
        'Resources': resources,
        'Outputs': outputs,
    }
