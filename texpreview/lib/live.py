'''
Implements the '--live/-l' mode, to give the user immediate feedback while editing.

We monitor the source .tex file, and rebuild the preview (and PDF, if requested) whenever it
changes. Editors tend to produce bursts of filesystem events for a single save, so rebuilds are
debounced: each change (re)starts a short timer, and only the last change in a burst triggers a
rebuild. Rebuilds never run concurrently.
'''

from __future__ import annotations
from .build_params import PreviewParams
from . import previewer

import watchdog.observers
import watchdog.events

import os.path
import threading
import time
from typing import Callable, Optional

NAME = 'Live updating'  # For progress/error messages


class Debouncer:
    '''
    Calls 'action' once, 'delay' seconds after the most recent trigger(). A trigger arriving while
    a call is pending cancels that call and starts the wait again.
    '''

    def __init__(self, delay: float, action: Callable[[], None]):
        self._delay = delay
        self._action = action
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._timer_lock = threading.Lock()
        self._action_lock = threading.Lock()


    def trigger(self):
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = threading.Timer(self._delay, self._fire, args = (self._generation,))
            self._timer.daemon = True
            self._timer.start()


    def cancel(self):
        with self._timer_lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


    @property
    def pending(self) -> bool:
        with self._timer_lock:
            return self._timer is not None


    def _fire(self, generation: int):
        with self._timer_lock:
            if generation != self._generation:
                # Superseded by a later trigger(), or cancelled.
                return
            self._timer = None

        with self._action_lock:
            self._action()


class LiveUpdater(watchdog.events.FileSystemEventHandler):

    def __init__(self, params: PreviewParams):
        self._params = params
        self._src_file = os.path.abspath(params.src_file)
        self._debouncer = Debouncer(params.debounce, self.rebuild)
        self._fs_observer = None
        self._update_n = 0
        self._update_event = threading.Event()


    @property
    def update_n(self): return self._update_n


    def wait_for_update(self, timeout = 1):
        result = self._update_event.wait(timeout)
        self._update_event.clear()
        return result


    def _is_source(self, path) -> bool:
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        return os.path.abspath(path) == self._src_file


    def on_closed(self, event):
        '''
        Event handler (watchdog.events.FileSystemEventHandler), called when something else finishes
        writing to a file. We watch the whole directory, but only care about the source file.
        '''
        if self._is_source(event.src_path):
            self._debouncer.trigger()


    def on_modified(self, event):
        if not event.is_directory and self._is_source(event.src_path):
            self._debouncer.trigger()


    def on_created(self, event):
        # Some editors save by writing a new file and renaming it over the old one.
        self.on_modified(event)


    def on_moved(self, event):
        if self._is_source(getattr(event, 'dest_path', '')) or self._is_source(event.src_path):
            self._debouncer.trigger()


    def rebuild(self):
        try:
            previewer.build(self._params)
        except Exception as e:
            # Keep watching; the next save may well fix it.
            self._params.progress.error(NAME, exception = e)

        self._update_n += 1
        self._update_event.set()


    def start(self):
        if self._fs_observer is not None:
            raise RuntimeError('Cannot start LiveUpdater() multiple times concurrently')

        self._fs_observer = watchdog.observers.Observer()
        self._fs_observer.schedule(self, os.path.dirname(self._src_file))
        self._fs_observer.start()


    def stop(self):
        self._debouncer.cancel()
        fs_observer = self._fs_observer
        self._fs_observer = None
        if fs_observer is not None:
            fs_observer.stop()
            fs_observer.join()


    def run(self):
        self.start()
        self._params.progress.progress(
            NAME,
            msg = f'Monitoring changes to {os.path.basename(self._src_file)}.',
            advice = 'Press Ctrl-C to quit.')

        try:
            while True:
                time.sleep(1)

        except KeyboardInterrupt:  # Ctrl-C
            pass

        finally:
            self.stop()
