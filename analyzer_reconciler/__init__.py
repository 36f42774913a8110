# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Reconciliation engine for IAM Access Analyzer analyzers."""

__version__ = "0.1.0"
