"""Synthesize ECS Fargate clusters into CloudFormation resources"""
from fargate.components.cluster import Cluster
from fargate.components.service import Service
from fargate.errors import ConfigurationError, DuplicateResourceError, FargateError
from fargate.resource import NamePostFix, Resource
from fargate.template import build_template, merge_fragments
from fargate.vpc import VPC
