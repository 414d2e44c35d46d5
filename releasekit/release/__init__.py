# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release pipeline subsystem for releasekit.

Provides version normalisation, the per-platform build and packaging
profiles, signing, update manifest generation, sidecar cleanup, and
pre-flight environment checks. Every heavy step is an external tool
invoked as a subprocess; this package only orchestrates them.
"""
