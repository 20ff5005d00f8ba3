__copyright__ = "Copyright (C) 2026 The heavycompute authors"

__license__ = """
Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
"""

from abc import ABC, abstractmethod
from time import perf_counter

import pyopencl as cl


# {{{ timing helpers

class Timer(ABC):
    """All timers report elapsed time in seconds."""

    def start(self):
        pass

    def stop(self):
        pass

    def add_event(self, evt):
        pass

    @abstractmethod
    def get_elapsed(self):
        pass


class WallTimer(Timer):
    """Host wall-clock timer."""

    def __init__(self):
        self.start_time = None
        self.end_time = None

    def start(self):
        self.start_time = perf_counter()

    def stop(self):
        self.end_time = perf_counter()

    def get_elapsed(self):
        if self.start_time is None or self.end_time is None:
            raise RuntimeError("timer was not started and stopped")
        return self.end_time - self.start_time


class EventTimer(Timer):
    """Measures the span between the device-side start timestamp of the
    first added event and the end timestamp of the last one.

    The events must come from a queue created with
    :attr:`pyopencl.command_queue_properties.PROFILING_ENABLE`.
    """

    def __init__(self):
        self.events = []
        self.stopped = False

    def start(self):
        self.events = []
        self.stopped = False

    def add_event(self, evt):
        self.events.append(evt)

    def stop(self):
        if self.events:
            cl.wait_for_events(self.events)
        self.stopped = True

    def get_elapsed(self):
        if not self.stopped:
            raise RuntimeError("timer must be stopped before reading it")
        if not self.events:
            return 0.

        return 1e-9*(self.events[-1].profile.end - self.events[0].profile.start)

# }}}

# vim: foldmethod=marker
