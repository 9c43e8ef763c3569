# -*- coding: utf-8 -*-

import logging
from threading import Lock, Timer

_logger = logging.getLogger(__name__)


class PeriodicTask(object):
    """Generic Thread-based service, executing a task at regular interval.

    After each execution, the next execution is scheduled after the specified
    delay. The delay doesn't include the task's duration.

    Attributes:
        delay (float): delay between two executions, in seconds. When
            modified, the new value will be used only after the next
            execution.
        context (dict): dict that can be used as a scope shared between the
            multiple executions and/or the caller.
        args (tuple): arguments passed to the task.
        kwargs (dict): keyword arguments passed to the task.

    Example:

        >>> def _task(pt, arg):
        ...     pt.context['count'] = pt.context.get('count', 0) + arg
        >>> task = PeriodicTask('MyTask', 1, _task, 17)
        >>> task.start()
        >>> task.stop()
    """

    def __init__(self, name, delay, task, *args, **kwargs):
        """Constructor
        Args:
            name (str): Thread name.
            delay (float): Delay between two executions, in seconds
            task (Callable[[PeriodicTask, ...], T]): task to execute each
                periods. First argument is the PeriodicTask instance.
            *args (optional): arguments passed to the task.
            **kwargs (optional): keywords arguments passed to the task.
        """
        self.delay = delay
        self.context = {}
        self.args = args
        self.kwargs = kwargs

        self._name = name
        self._task = task
        self._timer = None
        self._stopped = False
        self._lock = Lock()

    def _schedule(self, delay):
        # self._lock must be acquired.
        self._timer = Timer(delay, self._exec_task)
        self._timer.name = self._name
        self._timer.daemon = True
        self._timer.start()

    def _exec_task(self):
        try:
            self._task(self, *self.args, **self.kwargs)
        except Exception:
            _logger.exception('Periodic task %s has raised exception',
                              self._name)
        with self._lock:
            if not self._stopped:
                self._schedule(self.delay)

    def start(self, immediate=True):
        """Start the task.

        Args:
            immediate (bool): if True, the first execution is immediate.
                Otherwise, it occurs after the delay.
        """
        _logger.debug('Start periodic task %s', self._name)
        with self._lock:
            self._stopped = False
            self._schedule(0 if immediate else self.delay)

    def stop(self, join=False):
        """Stop the task.

        Note that if the function is running at the moment this method is
        called, the current iteration cannot be stopped.

        Args:
            join (bool, optional): if True, will block until the running task
                finish. Default to False
        """
        _logger.debug('Stop periodic task %s', self._name)
        with self._lock:
            self._stopped = True
            timer = self._timer
            if timer:
                timer.cancel()

        if join and timer:
            timer.join()

    @property
    def is_running(self):
        return not self._stopped and self._timer is not None
