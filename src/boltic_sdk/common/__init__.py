# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Common utilities and constants for the Boltic SDK."""
