"""
Tests for the AWS Client module.
"""

import pytest

from awsugar.core.aws_client import DEFAULT_REGION, AWSClient
from awsugar.core.exceptions import AWSClientError, CredentialsError


class TestAWSClient:
    """Tests for AWSClient class."""

    def test_client_initialization(self, mock_aws_environment):
        """Test basic client initialization."""
        client = AWSClient(region="us-east-1")
        assert client.region == "us-east-1"
        assert client.profile is None

    def test_default_region(self, mock_aws_environment):
        """The default region is us-west-2."""
        assert AWSClient().region == DEFAULT_REGION == "us-west-2"

    def test_client_with_profile(self, mock_aws_environment):
        """Test client initialization with profile."""
        client = AWSClient(region="us-west-2", profile="test-profile")
        assert client.region == "us-west-2"
        assert client.profile == "test-profile"

    def test_get_ec2_client(self, mock_aws_environment):
        """Test getting EC2 client."""
        client = AWSClient(region="us-east-1")
        assert client.get_ec2_client() is not None

    def test_get_elb_client(self, mock_aws_environment):
        """Test getting Classic ELB client."""
        client = AWSClient(region="us-east-1")
        assert client.get_elb_client() is not None

    def test_clients_are_cached(self, mock_aws_environment):
        """The same service client is returned on every call."""
        client = AWSClient(region="us-east-1")
        assert client.get_ec2_client() is client.get_ec2_client()

    def test_validate_credentials(self, mock_aws_environment):
        """Test credential validation."""
        client = AWSClient(region="us-east-1")
        assert client.validate_credentials() is True

    def test_get_account_id(self, mock_aws_environment):
        """Test getting account ID."""
        client = AWSClient(region="us-east-1")
        account_id = client.get_account_id()
        assert len(account_id) == 12

    def test_with_region(self, mock_aws_environment):
        """Test creating client for different region."""
        client = AWSClient(region="us-east-1", profile="test")
        new_client = client.with_region("eu-west-1")

        assert new_client.region == "eu-west-1"
        assert new_client.profile == "test"
        assert client.region == "us-east-1"

    def test_retry_config(self, mock_aws_environment):
        """Test that retry configuration is applied."""
        client = AWSClient(region="us-east-1", max_retries=5, timeout=60)
        assert client.max_retries == 5
        assert client.timeout == 60

    def test_context_manager_drops_clients(self, mock_aws_environment):
        """Leaving the context clears the cached session and clients."""
        with AWSClient(region="us-east-1") as client:
            client.get_ec2_client()
            assert client._clients
        assert client._clients == {}
        assert client._session is None

    def test_repr(self):
        """The representation names the region and profile."""
        assert repr(AWSClient(region="eu-west-1")) == (
            "AWSClient(region='eu-west-1', profile=None, max_retries=3)"
        )


class TestAWSClientErrors:
    """Tests for AWSClient error handling."""

    def test_invalid_profile_error(self, mock_aws_environment):
        """An unknown profile surfaces as a CredentialsError."""
        client = AWSClient(region="us-east-1", profile="nonexistent-profile-xyz")
        with pytest.raises(CredentialsError) as exc_info:
            client.get_ec2_client()

        assert "nonexistent-profile-xyz" in str(exc_info.value)
        assert isinstance(exc_info.value, AWSClientError)
