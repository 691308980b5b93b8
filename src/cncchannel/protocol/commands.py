"""
Outbound commands and their wire encoding.

Every command is a tagged record: the 'cmd' family and the 'action' select the operation, and the
remaining fields are its arguments. On the wire a command is one JSON object per frame, e.g.

    {"cmd": "program", "action": "start", "programName": "demo.ngc", "invertZ": true, "scale": 2}

Commands carry no correlation id; the reply is matched by its kind alone.
"""
import json
import logging

from cncchannel.schema.messages import runtime_settings_fields, system_settings_fields
from cncchannel.schema.validators import boolean, number, record, string
from cncchannel.support.records import Record

logger = logging.getLogger(__name__)


class CommandError(ValueError):
    """ A command was built with arguments of the wrong shape. """


class Command(Record):
    """
    Base class for all commands. Subclasses define the cmd and action tags and a record check
    for the arguments, which is applied on construction.
    """
    __slots__ = ()
    cmd = None
    action = None
    arguments = record()

    def __init__(self, fields=None, **kwargs):
        values = dict(fields or {})
        values.update(kwargs)
        result = self.arguments(values)
        if not result:
            raise CommandError("%s/%s: %s at %s" % (self.cmd, self.action, result.reason, result.where()))
        super().__init__(values)

    def to_wire(self) -> dict:
        wire = {'cmd': self.cmd, 'action': self.action}
        wire.update(self.as_dict())
        return wire

    def __repr__(self):
        return "%s(%s/%s)%s" % (type(self).__name__, self.cmd, self.action, self._sorted_items_string())

    __str__ = __repr__


class FreezeX(Command):
    __slots__ = ()
    cmd, action = 'controller', 'freezeX'
    arguments = record(required={'freeze': boolean})

    def __init__(self, freeze):
        super().__init__(freeze=freeze)


class FreezeY(Command):
    __slots__ = ()
    cmd, action = 'controller', 'freezeY'
    arguments = record(required={'freeze': boolean})

    def __init__(self, freeze):
        super().__init__(freeze=freeze)


class Slow(Command):
    __slots__ = ()
    cmd, action = 'controller', 'slow'
    arguments = record(required={'slow': boolean})

    def __init__(self, slow):
        super().__init__(slow=slow)


class SwitchOnOff(Command):
    """ switches the machine power on or off. """
    __slots__ = ()
    cmd, action = 'control', 'onOff'
    arguments = record(required={'on': boolean})

    def __init__(self, on):
        super().__init__(on=on)


class GetPrograms(Command):
    __slots__ = ()
    cmd, action = 'program', 'get'

    def __init__(self):
        super().__init__()


class LoadProgram(Command):
    __slots__ = ()
    cmd, action = 'program', 'load'
    arguments = record(required={'programName': string})

    def __init__(self, program_name):
        super().__init__(programName=program_name)


class SaveProgram(Command):
    __slots__ = ()
    cmd, action = 'program', 'save'
    arguments = record(required={'programName': string, 'program': string})

    def __init__(self, program_name, program):
        super().__init__(programName=program_name, program=program)


class DeleteProgram(Command):
    __slots__ = ()
    cmd, action = 'program', 'delete'
    arguments = record(required={'programName': string})

    def __init__(self, program_name):
        super().__init__(programName=program_name)


class StartProgram(Command):
    __slots__ = ()
    cmd, action = 'program', 'start'
    arguments = record(required={'programName': string, 'invertZ': boolean, 'scale': number})

    def __init__(self, program_name, invert_z=False, scale=1.0):
        super().__init__(programName=program_name, invertZ=invert_z, scale=scale)


class CancelProgram(Command):
    __slots__ = ()
    cmd, action = 'program', 'cancel'

    def __init__(self):
        super().__init__()


class GetSystemSettings(Command):
    __slots__ = ()
    cmd, action = 'settings', 'getSystem'

    def __init__(self):
        super().__init__()


class GetRuntimeSettings(Command):
    __slots__ = ()
    cmd, action = 'settings', 'getRuntime'

    def __init__(self):
        super().__init__()


def _settings_fields(settings, kwargs):
    """ accepts a mapping or a received settings message; the message discriminant is not sent back. """
    values = settings.as_dict() if isinstance(settings, Record) else dict(settings or {})
    values.pop('type', None)
    values.update(kwargs)
    return values


class SetSystemSettings(Command):
    """ replaces the complete system settings. The controller applies them after a restart. """
    __slots__ = ()
    cmd, action = 'settings', 'setSystem'
    arguments = system_settings_fields

    def __init__(self, settings=None, **kwargs):
        super().__init__(_settings_fields(settings, kwargs))


class SetRuntimeSettings(Command):
    """ updates any subset of the runtime settings. """
    __slots__ = ()
    cmd, action = 'settings', 'setRuntime'
    arguments = record(optional=dict(runtime_settings_fields.required, **runtime_settings_fields.optional))

    def __init__(self, settings=None, **kwargs):
        super().__init__(_settings_fields(settings, kwargs))


def encode(command: Command) -> str:
    if not isinstance(command, Command):
        raise CommandError("not a command: %r" % (command,))
    return json.dumps(command.to_wire())


class CommandEncoder:
    """
    Sends commands over a conduit. Nothing is buffered: a command sent while the conduit is
    closed is dropped.
    """

    def __init__(self, conduit):
        self.conduit = conduit

    def send(self, command: Command) -> bool:
        """
        :return: True if the command was written to the conduit.
        """
        frame = encode(command)
        conduit = self.conduit
        if conduit is None or not conduit.open:
            logger.debug("not connected, dropping %s" % command)
            return False
        conduit.write(frame)
        return True
