# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

from dotfiles_linker.cli import main

main()
