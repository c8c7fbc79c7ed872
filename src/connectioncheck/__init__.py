"""
ConnectionChecker - Network Path Diagnostics for Support Tickets

Runs traceroutes to a fixed list of game-server locations in parallel
and collects the results into a single report that end users can send
to a support team.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
