#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
config.py

Configuration constants and defaults for the AWS Recipe Architect compiler.

Key idea: the catalog is code, the money is data
------------------------------------------------
Item ids, region codes and the component rule table live in Python modules
because they are part of the stable wire contract (ids are persisted by the
builder UI and sent to the payment backend).

Prices are different. The provider fee table, the complexity weights and the
AWS usage placeholder model are tuned often, so they live in a YAML fee
schedule (pricing/definitions/fee_schedule.yaml) that can be swapped with an
environment variable without touching code.
"""

import os  # Standard library: environment overrides via os.getenv.

# ---------------------------------------------------------------------
# Defaults: region / tier / currency
# ---------------------------------------------------------------------
# DEFAULT_REGION:
# - Used when the recipe does not carry a region, or carries one we do not know.
# - Must be one of the five supported region codes (see catalog/regions.py).
# - Override with AWSRECIPE_DEFAULT_REGION.
DEFAULT_REGION = os.getenv("AWSRECIPE_DEFAULT_REGION", "us-east-1")

# DEFAULT_TIER:
# - Tier used by the CLI when neither --tier nor the recipe file gives one.
# - 1 = deploy & own, 2 = managed monthly, 3 = Terraform kit.
DEFAULT_TIER = int(os.getenv("AWSRECIPE_DEFAULT_TIER", "2"))

# CURRENCY:
# - All amounts are whole US dollars. Only used for display.
CURRENCY = os.getenv("AWSRECIPE_CURRENCY", "USD")

# PROVIDER_NAME:
# - Name of the delivery company shown in component details and price labels.
PROVIDER_NAME = os.getenv("AWSRECIPE_PROVIDER_NAME", "AspenX")

# ---------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------
# FEE_SCHEDULE_FILE:
# - Optional path to an alternate YAML fee schedule.
# - Empty string means "use the bundled pricing/definitions/fee_schedule.yaml".
FEE_SCHEDULE_FILE = os.getenv("AWSRECIPE_FEE_SCHEDULE", "").strip()

# COMPLEXITY_CEILING:
# - Upper clamp for the complexity score.
# - 0 or a negative value disables the clamp.
COMPLEXITY_CEILING = int(os.getenv("AWSRECIPE_COMPLEXITY_CEILING", "100"))

# Complexity label thresholds (score >= HIGH -> "High", >= MEDIUM -> "Medium").
COMPLEXITY_HIGH = 60
COMPLEXITY_MEDIUM = 30

# ---------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------
# VPC_CIDR:
# - Fixed base block. The subnet offsets in planner/network.py assume a /16
#   under 10.0.0.0, so this is not an env override.
VPC_CIDR = "10.0.0.0/16"

# SUBNET_STRIDE:
# - Third-octet distance between the first subnet of consecutive AZs.
# - Inside one AZ the public / private-app / private-data subnets sit at
#   +0 / +16 / +32.
SUBNET_STRIDE = 48
SUBNET_ROLE_OFFSET = 16

# ---------------------------------------------------------------------
# CLI / runs
# ---------------------------------------------------------------------
# RUNS_DIR:
# - Root folder where the CLI writes runs/<prefix>/{plan.json,report.md,...}.
RUNS_DIR = os.getenv("AWSRECIPE_RUNS_DIR", "runs")

# DEFAULT_LOG_LEVEL:
# - Log level for the CLI when --log-level is not given.
DEFAULT_LOG_LEVEL = os.getenv("AWSRECIPE_LOG_LEVEL", "INFO")
