# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import pytest

from storypipe.util.message import MessageHandler

class RecordingMessageHandler(MessageHandler):
  def __init__(self) -> None:
    self.records = []

  def message(self, importance, msg, file="", location=""):
    self.records.append((importance, msg))

  def count(self, importance) -> int:
    return sum(1 for imp, _ in self.records if imp == importance)

@pytest.fixture
def messages():
  handler = RecordingMessageHandler()
  MessageHandler.install_message_handler(handler)
  yield handler
  MessageHandler.install_message_handler(None)
