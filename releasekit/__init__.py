# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
releasekit: release packaging for the cross-compiled launcher.

Drives the external compiler, packager, and signer for one platform at a
time, renames what they produce to canonical names, and writes the update
manifest that the launcher's auto-updater reads.
"""

__version__ = "0.1.0"
