import ipaddress

import pytest

from aws_recipe_architect.catalog import Region
from aws_recipe_architect.planner import derive_vpc
from aws_recipe_architect.planner.network import subnets_overlap
from aws_recipe_architect.planner.types import Subnet, SubnetRole


def test_single_az_layout():
    vpc = derive_vpc(False, "us-west-2")
    assert vpc.cidr == "10.0.0.0/16"
    assert vpc.multi_az is False
    assert vpc.azs == ("us-west-2a",)
    assert [(s.az, s.role, s.cidr) for s in vpc.subnets] == [
        ("us-west-2a", SubnetRole.PUBLIC, "10.0.0.0/24"),
        ("us-west-2a", SubnetRole.PRIVATE_APP, "10.0.16.0/24"),
        ("us-west-2a", SubnetRole.PRIVATE_DATA, "10.0.32.0/24"),
    ]


def test_multi_az_layout_tags_each_subnet_with_its_az():
    vpc = derive_vpc(True, Region.US_EAST_1)
    assert vpc.azs == ("us-east-1a", "us-east-1b")
    assert [s.cidr for s in vpc.subnets] == [
        "10.0.0.0/24",
        "10.0.16.0/24",
        "10.0.32.0/24",
        "10.0.48.0/24",
        "10.0.64.0/24",
        "10.0.80.0/24",
    ]
    assert [s.az for s in vpc.subnets] == ["us-east-1a"] * 3 + ["us-east-1b"] * 3


@pytest.mark.parametrize("multi_az", [False, True])
@pytest.mark.parametrize("region", list(Region))
def test_subnets_are_disjoint_and_inside_the_vpc(region, multi_az):
    vpc = derive_vpc(multi_az, region)
    block = ipaddress.ip_network(vpc.cidr)
    nets = [ipaddress.ip_network(s.cidr) for s in vpc.subnets]
    assert all(net.subnet_of(block) for net in nets)
    for i, left in enumerate(nets):
        for right in nets[i + 1:]:
            assert not left.overlaps(right)
    assert subnets_overlap(vpc.subnets) == []
    assert len(vpc.subnets) == 3 * len(vpc.azs)


def test_subnets_overlap_reports_clashes():
    subnets = [
        Subnet("us-east-1a", SubnetRole.PUBLIC, "10.0.0.0/24"),
        Subnet("us-east-1a", SubnetRole.PRIVATE_APP, "10.0.0.0/23"),
    ]
    assert subnets_overlap(subnets) == [("10.0.0.0/24", "10.0.0.0/23")]
