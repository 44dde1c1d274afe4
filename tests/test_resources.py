"""
Tests for the resource kinds, their listing functions and operations.
"""

import pytest

from awsugar.core.base_resource import Resource, dict_to_tags, tags_to_dict
from awsugar.core.exceptions import (
    DeleteError,
    ListingError,
    SnapshotError,
    UnsupportedKindError,
)
from awsugar.resources import KINDS, get_kind
from awsugar.resources.instance import EC2Instance, list_instances
from awsugar.resources.load_balancer import LoadBalancer, list_inactive_load_balancers
from awsugar.resources.network_interface import (
    NetworkInterface,
    list_unattached_network_interfaces,
)
from awsugar.resources.volume import EBSVolume, list_available_volumes
from helpers import (
    REGION,
    client_error,
    connection_error,
    create_network_interface,
    create_volume,
    run_instance,
)


class TestTags:
    """Tests for tag conversion helpers."""

    def test_tags_to_dict_keeps_order(self):
        tags = [{"Key": "b", "Value": "2"}, {"Key": "a", "Value": "1"}]
        assert list(tags_to_dict(tags).items()) == [("b", "2"), ("a", "1")]

    def test_tags_to_dict_none(self):
        assert tags_to_dict(None) == {}

    def test_dict_to_tags(self):
        assert dict_to_tags({"Name": "db"}) == [{"Key": "Name", "Value": "db"}]


class TestResourceName:
    """Tests for name resolution."""

    def test_name_tag(self):
        assert Resource(id="i-1", tags={"Name": "web"}).name == "web"

    def test_falls_back_to_id(self):
        assert Resource(id="i-1", tags={"Env": "prod"}).name == "i-1"

    def test_empty_name_tag_falls_back_to_id(self):
        assert Resource(id="i-1", tags={"Name": ""}).name == "i-1"

    def test_str(self):
        assert str(EBSVolume(id="vol-1", tags={"Name": "db1"})) == "EBS [db1]"


class TestKindRegistry:
    """Tests for get_kind."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("instance", "instance"),
            ("ec2", "instance"),
            ("ELB", "load-balancer"),
            ("volume", "volume"),
            ("ebs", "volume"),
            ("eni", "network-interface"),
            ("network-interface", "network-interface"),
        ],
    )
    def test_resolves_names_and_aliases(self, name, expected):
        assert get_kind(name).name == expected

    def test_unsupported_kind(self):
        with pytest.raises(UnsupportedKindError) as exc_info:
            get_kind("rds")

        assert "Resource type not supported" in str(exc_info.value)
        assert exc_info.value.supported == list(KINDS)

    def test_only_instances_accept_ids(self):
        assert [k.name for k in KINDS.values() if k.accepts_ids] == ["instance"]

    def test_ids_ignored_for_other_kinds(self, aws_client, ec2_client):
        """IDs given to a kind that cannot filter are ignored."""
        volume_id = create_volume(ec2_client)
        volumes = get_kind("volume").list(aws_client, ids=["vol-other"])
        assert [v.id for v in volumes] == [volume_id]


class TestEBSVolume:
    """Tests for EBS volumes."""

    def test_snapshot_description_with_name(self):
        volume = EBSVolume(id="vol-123", tags={"Name": "db1"})
        assert volume.snapshot_description() == "vol-123_db1"

    def test_snapshot_description_without_name(self):
        assert EBSVolume(id="vol-123").snapshot_description() == "vol-123"

    def test_snapshot_tags_drop_reserved_keys(self):
        volume = EBSVolume(
            id="vol-123",
            tags={"Name": "db1", "aws:cloudformation:stack-name": "x", "Team": "ops"},
        )
        assert volume.snapshot_tags() == {"Name": "db1", "Team": "ops"}

    def test_volume_is_its_own_sweetener(self):
        volume = EBSVolume(id="vol-123")
        assert volume.sweeteners() == [volume]

    def test_list_available_volumes(self, aws_client, ec2_client):
        """Only unattached volumes are listed, with their tags."""
        available = create_volume(ec2_client, tags={"Name": "orphan"})
        instance_id = run_instance(ec2_client, stopped=False)
        attached = create_volume(ec2_client)
        ec2_client.attach_volume(VolumeId=attached, InstanceId=instance_id, Device="/dev/sdf")

        volumes = list_available_volumes(aws_client)

        assert [v.id for v in volumes] == [available]
        assert volumes[0].name == "orphan"
        assert volumes[0].status == "available"

    def test_unreachable_endpoint_is_listing_error(self, monkeypatch, aws_client):
        ec2 = aws_client.get_ec2_client()

        def fail(name):
            raise connection_error()

        monkeypatch.setattr(ec2, "get_paginator", fail)

        with pytest.raises(ListingError, match="Couldn't list EBS volumes: Could not connect"):
            get_kind("volume").list(aws_client)

    def test_sweeten_creates_tagged_snapshot(self, context, ec2_client):
        """The snapshot carries the description and the volume tags."""
        volume_id = create_volume(ec2_client, tags={"Name": "db1", "Team": "ops"})
        volume = list_available_volumes(context.aws_client)[0]

        snapshot = volume.sweeten(context)

        assert snapshot.is_completed
        described = ec2_client.describe_snapshots(SnapshotIds=[snapshot.id])["Snapshots"][0]
        assert described["VolumeId"] == volume_id
        assert described["Description"] == f"{volume_id}_db1"
        assert tags_to_dict(described["Tags"]) == {"Name": "db1", "Team": "ops"}

    def test_sweeten_untagged_volume(self, context, ec2_client):
        volume_id = create_volume(ec2_client)

        snapshot = EBSVolume(id=volume_id).sweeten(context)

        described = ec2_client.describe_snapshots(SnapshotIds=[snapshot.id])["Snapshots"][0]
        assert described["Description"] == volume_id

    def test_sweeten_missing_volume(self, context):
        with pytest.raises(SnapshotError) as exc_info:
            EBSVolume(id="vol-00000000000000000").sweeten(context)

        assert "Couldn't snapshot EBS volume [vol-00000000000000000]" in str(exc_info.value)
        assert exc_info.value.snapshot_id is None

    def test_delete(self, context, ec2_client):
        volume_id = create_volume(ec2_client)

        EBSVolume(id=volume_id).delete(context)

        assert list_available_volumes(context.aws_client) == []

    def test_delete_missing_volume(self, context):
        volume = EBSVolume(id="vol-00000000000000000", tags={"Name": "gone"})

        with pytest.raises(DeleteError) as exc_info:
            volume.delete(context)

        assert str(exc_info.value).startswith("Couldn't delete EBS [gone]: ")
        assert exc_info.value.resource_id == "vol-00000000000000000"
        assert exc_info.value.details["error_code"] == "InvalidVolume.NotFound"


class TestEC2Instance:
    """Tests for EC2 instances."""

    def test_volumes_to_sweeten(self):
        instance = EC2Instance(
            id="i-1",
            tags={"Name": "web"},
            block_device_mappings=[("/dev/sda1", "vol-a"), ("/dev/sdf", "vol-b")],
        )

        volumes = instance.volumes_to_sweeten()

        assert [v.id for v in volumes] == ["vol-a", "vol-b"]
        assert volumes[1].tags == {"Name": "web", "mount_point": "/dev/sdf"}
        assert volumes[1].mount_point == "/dev/sdf"
        assert volumes[1].snapshot_description() == "vol-b_web"
        assert instance.tags == {"Name": "web"}
        assert instance.sweeteners() == volumes

    def test_from_api_skips_non_ebs_mappings(self):
        instance = EC2Instance.from_api(
            {
                "InstanceId": "i-1",
                "State": {"Name": "stopped"},
                "BlockDeviceMappings": [
                    {"DeviceName": "/dev/sda1", "Ebs": {"VolumeId": "vol-a"}},
                    {"DeviceName": "/dev/sdb"},
                ],
            }
        )
        assert instance.block_device_mappings == [("/dev/sda1", "vol-a")]
        assert instance.state == "stopped"

    def test_list_stopped_instances(self, aws_client, ec2_client):
        """Without IDs only stopped instances are listed."""
        stopped = run_instance(ec2_client, name="idle")
        run_instance(ec2_client, stopped=False)

        instances = list_instances(aws_client)

        assert [i.id for i in instances] == [stopped]
        assert instances[0].name == "idle"
        assert instances[0].block_device_mappings

    def test_list_by_ids(self, aws_client, ec2_client):
        """Explicit IDs are listed whatever their live state."""
        running = run_instance(ec2_client, stopped=False)
        run_instance(ec2_client)

        instances = list_instances(aws_client, ids=[running])

        assert [i.id for i in instances] == [running]

    def test_list_unknown_id_is_listing_error(self, aws_client):
        with pytest.raises(ListingError) as exc_info:
            list_instances(aws_client, ids=["i-00000000000000000"])
        assert exc_info.value.resource_type == "EC2"
        assert exc_info.value.region == REGION

    def test_delete_terminates(self, context, ec2_client):
        instance_id = run_instance(ec2_client)

        EC2Instance(id=instance_id).delete(context)

        state = ec2_client.describe_instances(InstanceIds=[instance_id])["Reservations"][0][
            "Instances"
        ][0]["State"]["Name"]
        assert state in ("shutting-down", "terminated")


class TestNetworkInterface:
    """Tests for network interfaces."""

    def test_list_unattached(self, aws_client, ec2_client, subnet):
        eni_id = create_network_interface(ec2_client, subnet, name="leftover")

        interfaces = list_unattached_network_interfaces(aws_client)

        assert [i.id for i in interfaces] == [eni_id]
        assert interfaces[0].name == "leftover"
        assert interfaces[0].subnet_id == subnet
        assert interfaces[0].sweeteners() == []

    def test_delete(self, context, ec2_client, subnet):
        eni_id = create_network_interface(ec2_client, subnet)

        NetworkInterface(id=eni_id).delete(context)

        assert list_unattached_network_interfaces(context.aws_client) == []

    def test_listing_failure(self, monkeypatch, aws_client):
        ec2 = aws_client.get_ec2_client()

        def fail(name):
            raise client_error("UnauthorizedOperation")

        monkeypatch.setattr(ec2, "get_paginator", fail)

        with pytest.raises(ListingError, match="Insufficient permissions"):
            list_unattached_network_interfaces(aws_client)


class TestLoadBalancer:
    """Tests for classic load balancers."""

    @staticmethod
    def create(elb_client, name):
        elb_client.create_load_balancer(
            LoadBalancerName=name,
            Listeners=[{"Protocol": "http", "LoadBalancerPort": 80, "InstancePort": 8080}],
            AvailabilityZones=[f"{REGION}a"],
        )

    def test_list_inactive(self, aws_client, elb_client, ec2_client):
        """Load balancers with registered instances are not listed."""
        self.create(elb_client, "idle-lb")
        self.create(elb_client, "busy-lb")
        instance_id = run_instance(ec2_client, stopped=False)
        elb_client.register_instances_with_load_balancer(
            LoadBalancerName="busy-lb", Instances=[{"InstanceId": instance_id}]
        )

        balancers = list_inactive_load_balancers(aws_client)

        assert [b.id for b in balancers] == ["idle-lb"]
        assert balancers[0].name == "idle-lb"

    def test_delete(self, context, elb_client):
        self.create(elb_client, "idle-lb")

        LoadBalancer(id="idle-lb").delete(context)

        assert elb_client.describe_load_balancers()["LoadBalancerDescriptions"] == []
