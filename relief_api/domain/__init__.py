# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the disaster relief platform.

Pure functions with no side effects: contact masking, per-viewer disclosure
and workflow transition rules.
"""
