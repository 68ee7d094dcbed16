"""Inject a common tag set into every taggable resource of the stack"""
import pulumi

# resource types of this program that accept a ``tags`` input
TAGGABLE_RESOURCE_TYPES = {
    'aws:cloudformation/stack:Stack',
}


def is_taggable(type_):
    return type_ in TAGGABLE_RESOURCE_TYPES


def auto_tag(args, auto_tags):
    if not is_taggable(args.type_):
        return None
    args.props['tags'] = {**(args.props.get('tags') or {}), **auto_tags}
    return pulumi.ResourceTransformationResult(args.props, args.opts)


def register_auto_tags(auto_tags):
    pulumi.runtime.register_stack_transformation(lambda args: auto_tag(args, auto_tags))
