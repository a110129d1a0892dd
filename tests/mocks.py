"""Shared identities and fixture data for the network tests."""

from datetime import datetime

SUPPLIER = "grower@farm.example"
SHIPPER = "ops@reefer.example"
CHEAP_SHIPPER = "cheap@coldchain.example"
RETAILER = "buyer@grocer.example"
OTHER_RETAILER = "fresh@market.example"
ARRIVAL_DUE = datetime(2026, 3, 1, 12, 0)
