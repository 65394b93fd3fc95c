# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Version information for the Boltic SDK."""

__version__ = "1.0.0"
