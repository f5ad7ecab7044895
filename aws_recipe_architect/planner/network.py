"""VPC shape: one /16 with three /24 subnets per availability zone."""

from __future__ import annotations

import ipaddress
from typing import Iterable, List, Tuple

from ..catalog import Region, coerce_region
from ..config import SUBNET_ROLE_OFFSET, SUBNET_STRIDE, VPC_CIDR
from .types import Subnet, SubnetRole, VpcPlan

_ROLES = (SubnetRole.PUBLIC, SubnetRole.PRIVATE_APP, SubnetRole.PRIVATE_DATA)
_AZ_SUFFIXES = ("a", "b")


def availability_zones(region: Region, multi_az: bool) -> Tuple[str, ...]:
    count = 2 if multi_az else 1
    return tuple(f"{region.value}{suffix}" for suffix in _AZ_SUFFIXES[:count])


def _subnets(azs: Iterable[str]) -> Tuple[Subnet, ...]:
    out: List[Subnet] = []
    for idx, az in enumerate(azs):
        base = idx * SUBNET_STRIDE
        for role_idx, role in enumerate(_ROLES):
            octet = base + role_idx * SUBNET_ROLE_OFFSET
            out.append(Subnet(az=az, role=role, cidr=f"10.0.{octet}.0/24"))
    return tuple(out)


def derive_vpc(is_multi_az: bool, region: Region | str) -> VpcPlan:
    region = coerce_region(region)
    azs = availability_zones(region, is_multi_az)
    return VpcPlan(cidr=VPC_CIDR, multi_az=bool(is_multi_az), azs=azs, subnets=_subnets(azs))


def subnets_overlap(subnets: Iterable[Subnet]) -> List[Tuple[str, str]]:
    """Return every pair of overlapping subnet CIDRs (empty when disjoint)."""
    nets = [ipaddress.ip_network(s.cidr) for s in subnets]
    clashes: List[Tuple[str, str]] = []
    for i, left in enumerate(nets):
        for right in nets[i + 1:]:
            if left.overlaps(right):
                clashes.append((str(left), str(right)))
    return clashes


__all__ = ["availability_zones", "derive_vpc", "subnets_overlap"]
