"""
Pytest configuration and shared fixtures for testing.
"""

import threading

import boto3
import pytest
from moto import mock_aws

from awsugar.core.aws_client import AWSClient
from awsugar.core.context import CleanupContext
from helpers import REGION


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("AWSUGAR_PROFILE", raising=False)


@pytest.fixture
def mock_aws_environment(aws_credentials):
    """Create a mocked AWS environment."""
    with mock_aws():
        yield


@pytest.fixture
def aws_client(mock_aws_environment):
    """Create an AWSClient instance for testing."""
    return AWSClient(region=REGION)


@pytest.fixture
def context(aws_client):
    """A cleanup context that never sleeps between snapshot polls."""
    return CleanupContext(aws_client=aws_client, poll_interval=0)


@pytest.fixture
def ec2_client(mock_aws_environment):
    """Create a boto3 EC2 client for setting up test resources."""
    return boto3.client("ec2", region_name=REGION)


@pytest.fixture
def elb_client(mock_aws_environment):
    """Create a boto3 ELB client for setting up test resources."""
    return boto3.client("elb", region_name=REGION)


@pytest.fixture
def vpc(ec2_client):
    """Create a VPC for testing."""
    response = ec2_client.create_vpc(CidrBlock="10.0.0.0/16")
    return response["Vpc"]["VpcId"]


@pytest.fixture
def subnet(ec2_client, vpc):
    """Create a subnet for testing."""
    response = ec2_client.create_subnet(
        VpcId=vpc,
        CidrBlock="10.0.1.0/24",
        AvailabilityZone=f"{REGION}a",
    )
    return response["Subnet"]["SubnetId"]


@pytest.fixture
def cancel_event():
    return threading.Event()
