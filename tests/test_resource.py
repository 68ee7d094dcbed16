"""Tests for resource naming and tagging."""
import pytest

from fargate.errors import ConfigurationError
from fargate.resource import NamePostFix, Resource, logical_id, render_tags


class TestLogicalId:
    """Tests for logical id normalisation."""

    def test_splits_on_separators(self):
        """Test separators are dropped and parts capitalised."""
        assert logical_id('api-cluster') == 'ApiCluster'
        assert logical_id('my_svc.v2') == 'MySvcV2'

    def test_keeps_existing_case(self):
        """Test already valid ids are unchanged."""
        assert logical_id('ECSApi') == 'ECSApi'

    def test_empty(self):
        """Test nothing usable is left from punctuation only."""
        assert logical_id('--') == ''


class TestRenderTags:
    """Tests for tag rendering."""

    def test_mapping(self):
        """Test a mapping is rendered as Key/Value pairs in order."""
        assert render_tags({'b': '1', 'a': '2'}) == [
            {'Key': 'b', 'Value': '1'},
            {'Key': 'a', 'Value': '2'},
        ]

    def test_values_are_strings(self):
        """Test non-string values from config are rendered as strings."""
        assert render_tags({'cost-center': 42, 'critical': True}) == [
            {'Key': 'cost-center', 'Value': '42'},
            {'Key': 'critical', 'Value': 'True'},
        ]

    def test_list_is_kept(self):
        """Test rendered tags are used as given."""
        tags = [{'Key': 'team', 'Value': 'core'}]
        assert render_tags(tags) == tags
        assert render_tags(tags) is not tags

    def test_none(self):
        """Test missing tags stay missing."""
        assert render_tags(None) is None


class TestResource:
    """Tests for the Resource base class."""

    def test_get_name(self):
        """Test names combine identity, kind and stage."""
        resource = Resource({}, 'prod-eu', 'ECSApi')
        assert resource.get_name(NamePostFix.CLUSTER) == 'ECSApiClusterProdEu'
        assert resource.get_name(NamePostFix.LOAD_BALANCER) == 'ECSApiALBProdEu'

    def test_names_are_distinct_per_kind(self):
        """Test every kind yields a different name."""
        resource = Resource({}, 'dev', 'ECSApi')
        names = {resource.get_name(postfix) for postfix in NamePostFix}
        assert len(names) == len(NamePostFix)

    def test_invalid_name(self):
        """Test a name without alphanumerics is rejected."""
        with pytest.raises(ConfigurationError):
            Resource({}, 'dev', '!!')

    def test_tagged_without_tags(self):
        """Test properties are left alone without tags."""
        assert Resource({}, 'dev', 'x').tagged({'A': 1}) == {'A': 1}

    def test_tagged_with_tags(self):
        """Test tags are added under Tags."""
        resource = Resource({}, 'dev', 'x', {'team': 'core'})
        assert resource.tagged({'A': 1}) == {'Tags': [{'Key': 'team', 'Value': 'core'}], 'A': 1}

    def test_define(self):
        """Test the definition shape."""
        definition = Resource({}, 'dev', 'x').define('AWS::ECS::Cluster', {}, DependsOn='Other')
        assert definition == {
            'Type': 'AWS::ECS::Cluster',
            'DeletionPolicy': 'Delete',
            'Properties': {},
            'DependsOn': 'Other',
        }
