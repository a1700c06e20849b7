# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
__version__ = "0.3.0"
