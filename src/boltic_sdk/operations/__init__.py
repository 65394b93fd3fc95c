# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the Boltic SDK.

This module contains the operation namespace classes that organize
related operations under intuitive namespaces:
- TableOperations: table CRUD, rename and sharing
- ColumnOperations: column CRUD on an existing table
"""

__all__ = []
