# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

__version__ = "0.1.0"
