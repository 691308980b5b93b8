class RetryStrategy:
    """ Decides how long to wait before the next attempt. """

    def __call__(self):
        return 0

    def reset(self):
        """ called once an attempt succeeded. """


class FixedDelayRetryStrategy(RetryStrategy):
    """
    Waits the same delay before every attempt. There is no backoff and no limit
    on the number of attempts.
    """

    def __init__(self, delay):
        """
        :param delay: The delay in seconds.
        """
        if delay < 0:
            raise ValueError("retry delay must not be negative, got %s" % delay)
        self.delay = delay
        self.attempts = 0

    def __call__(self):
        """ returns the time to wait before the next attempt, and counts the attempt. """
        self.attempts += 1
        return self.delay

    def reset(self):
        """ called once an attempt succeeded. """
        self.attempts = 0

    def __eq__(self, other):
        return isinstance(other, FixedDelayRetryStrategy) and other.delay == self.delay

    def __repr__(self):
        return "FixedDelayRetryStrategy(%s)" % self.delay
