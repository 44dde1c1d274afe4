"""
Builders and fakes shared by the test modules.
"""

from typing import Dict, List, Optional

from botocore.exceptions import ClientError, EndpointConnectionError

REGION = "us-east-1"
AMI_ID = "ami-12c6146b"


def create_volume(ec2_client, tags: Optional[Dict[str, str]] = None) -> str:
    """Create an available EBS volume and return its ID."""
    params = {"Size": 8, "AvailabilityZone": f"{REGION}a"}
    if tags:
        params["TagSpecifications"] = [
            {
                "ResourceType": "volume",
                "Tags": [{"Key": k, "Value": v} for k, v in tags.items()],
            }
        ]
    return ec2_client.create_volume(**params)["VolumeId"]


def create_network_interface(ec2_client, subnet_id: str, name: Optional[str] = None) -> str:
    """Create an unattached network interface and return its ID."""
    params = {"SubnetId": subnet_id}
    if name:
        params["TagSpecifications"] = [
            {
                "ResourceType": "network-interface",
                "Tags": [{"Key": "Name", "Value": name}],
            }
        ]
    return ec2_client.create_network_interface(**params)["NetworkInterface"][
        "NetworkInterfaceId"
    ]


def run_instance(ec2_client, name: Optional[str] = None, stopped: bool = True) -> str:
    """Launch an instance (stopped by default) and return its ID."""
    params = {"ImageId": AMI_ID, "MinCount": 1, "MaxCount": 1, "InstanceType": "t3.micro"}
    if name:
        params["TagSpecifications"] = [
            {"ResourceType": "instance", "Tags": [{"Key": "Name", "Value": name}]}
        ]
    instance_id = ec2_client.run_instances(**params)["Instances"][0]["InstanceId"]
    if stopped:
        ec2_client.stop_instances(InstanceIds=[instance_id])
    return instance_id


def client_error(code: str, message: str = "boom", operation: str = "Operation") -> ClientError:
    """Build a botocore ClientError with the given code."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def connection_error(region: str = REGION) -> EndpointConnectionError:
    """Build the botocore error raised when the endpoint is unreachable."""
    return EndpointConnectionError(endpoint_url=f"https://ec2.{region}.amazonaws.com/")


class FakeEC2:
    """
    Scripted stand-in for the EC2 client used by the snapshot waiter.

    Each entry of ``statuses`` is either a DescribeSnapshots item, a
    ``(state, progress)`` tuple or an exception to raise. The last
    entry is repeated once the script runs out.
    """

    def __init__(self, statuses: List, snapshot_id: str = "snap-123", volume_id: str = "vol-123"):
        self.statuses = list(statuses)
        self.snapshot_id = snapshot_id
        self.volume_id = volume_id
        self.calls = 0

    def describe_snapshots(self, SnapshotIds):
        self.calls += 1
        entry = self.statuses[min(self.calls, len(self.statuses)) - 1]
        if isinstance(entry, Exception):
            raise entry
        if isinstance(entry, dict):
            return {"Snapshots": [entry]}
        state, progress = entry
        return {
            "Snapshots": [
                {
                    "SnapshotId": SnapshotIds[0],
                    "VolumeId": self.volume_id,
                    "State": state,
                    "Progress": progress,
                }
            ]
        }


class FakeAWSClient:
    """Minimal AWSClient replacement exposing a scripted EC2 client."""

    def __init__(self, ec2=None, region: str = REGION):
        self.region = region
        self.profile = None
        self.ec2 = ec2

    def get_ec2_client(self):
        return self.ec2


class FakeClock:
    """Monotonic clock advancing by ``step`` seconds on every read."""

    def __init__(self, step: float = 1.0):
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current


