# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0

from .force_field import ForceField, TouchEvent

__all__ = [
    "ForceField",
    "TouchEvent",
]
