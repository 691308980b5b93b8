"""
The inbound message kinds of the controller channel.

Each kind pairs a discriminant with a record check and the delivery discipline of the stream
that carries it. The registry lists the top-level kinds in routing priority order, and the
kinds that only arrive wrapped in a reply envelope keyed by their inner discriminant.

Kinds fall in three families:

- state replicas (position, status, controller, settings ...) keep only their latest value,
- replies acknowledge a single command and are delivered once,
- log messages (info) keep a bounded history.
"""
from cncchannel.schema.validators import Invalid, RecordCheck, any_of, array_of, boolean, literal, nullable, \
    number, record, string
from cncchannel.support.records import Record
from cncchannel.support.streams import EventSubject, HistorySubject, LatestValueSubject

# number of info messages replayed to late subscribers
INFO_HISTORY = 25


class Discipline:
    """ How a stream treats subscribers that arrive late. """

    def new_subject(self, name):
        raise NotImplementedError

    def __eq__(self, other):
        return type(other) is type(self) and other.__dict__ == self.__dict__

    def __hash__(self):
        return hash(type(self))


class Latest(Discipline):
    def new_subject(self, name):
        return LatestValueSubject(name)

    def __repr__(self):
        return 'LATEST'


class Event(Discipline):
    def new_subject(self, name):
        return EventSubject(name)

    def __repr__(self):
        return 'EVENT'


class History(Discipline):
    def __init__(self, size):
        self.size = size

    def new_subject(self, name):
        return HistorySubject(self.size, name)

    def __repr__(self):
        return 'HISTORY(%d)' % self.size


LATEST = Latest()
EVENT = Event()
HISTORY = History(INFO_HISTORY)


class Message(Record):
    """
    A validated inbound message. The fields are exactly those received on the wire, including
    the 'type' discriminant. Messages unwrapped from a reply envelope also carry the envelope's
    'to' value as reply_to, which is not part of the fields.
    """
    __slots__ = ('reply_to',)

    def __init__(self, fields, reply_to=None):
        super().__init__(fields)
        object.__setattr__(self, 'reply_to', reply_to)


class PositionMessage(Message):
    __slots__ = ()


class StatusMessage(Message):
    __slots__ = ()


class ControllerMessage(Message):
    __slots__ = ()


class InfoMessage(Message):
    __slots__ = ()


class ConnectedMessage(Message):
    __slots__ = ()


class AvailablePrograms(Message):
    __slots__ = ()


class LoadProgramReply(Message):
    __slots__ = ()


class SaveProgramReply(Message):
    __slots__ = ()


class DeleteProgramReply(Message):
    __slots__ = ()


class StartProgramReply(Message):
    __slots__ = ()


class CancelProgramReply(Message):
    __slots__ = ()


class SystemSettings(Message):
    __slots__ = ()


class RuntimeSettings(Message):
    __slots__ = ()


class SystemSettingsSaved(Message):
    __slots__ = ()


class RuntimeSettingsSaved(Message):
    __slots__ = ()


class MessageKind:
    """
    One message shape.

    :param discriminant: the value of the 'type' field. Aliases are accepted too.
    :param fields: the record check for all other fields.
    :param message_class: the Message subclass produced on successful validation.
    :param stream: the name of the stream that carries messages of this kind.
    :param discipline: the delivery discipline of that stream.
    """

    def __init__(self, discriminant, fields: RecordCheck, message_class, stream, discipline, aliases=()):
        self.discriminant = discriminant
        self.aliases = tuple(aliases)
        self.message_class = message_class
        self.stream = stream
        self.discipline = discipline
        required = {'type': literal(discriminant, *aliases)}
        required.update(fields.required)
        self.check = RecordCheck(required, fields.optional, discriminant)

    def matches(self, raw) -> bool:
        """ narrowing predicate: True when raw is a valid message of this kind. """
        return bool(self.check(raw))

    def validate(self, raw, reply_to=None):
        """
        :return: a message of this kind, or an Invalid result describing the first problem found.
        """
        result = self.check(raw)
        if not result:
            return result
        return self.message_class(raw, reply_to)

    def __repr__(self):
        return "MessageKind(%s -> %s)" % (self.discriminant, self.stream)


program_info = record(required={
    'name': string,
    'path': string,
    'size': number,
    'linesOfCode': number,
    'createDateTs': number,
    'modifiedDateTs': number,
}, name='program info')

program_listing = record(required={
    'progs': array_of(program_info),
    'inputDir': array_of(string),
})

stepper_driver = record(required={
    'pull_gpio': number,
    'dir_gpio': number,
    'invert_dir': boolean,
}, optional={
    'ena_gpio': number,
    'end_left_gpio': number,
    'end_right_gpio': number,
}, name='stepper driver')

motor_settings = record(required={
    'driverSettings': any_of(literal('Mock'), record(required={'Stepper': stepper_driver})),
    'maxStepSpeed': number,
    'stepSize': number,
    'acceleration': number,
    'deceleration': number,
    'freeStepSpeed': number,
    'accelerationTimeScale': number,
}, name='motor settings')

system_settings_fields = record(required={
    'devMode': boolean,
    'motorX': motor_settings,
    'motorY': motor_settings,
    'motorZ': motor_settings,
    'switchOnOffDelay': number,
}, optional={
    'calibrateZGpio': number,
    'onOffGpio': number,
})

runtime_settings_fields = record(required={
    'inputDir': array_of(string),
    'inputUpdateReduce': number,
    'defaultSpeed': number,
    'rapidSpeed': number,
    'scale': number,
    'invertZ': boolean,
    'showConsoleOutput': boolean,
    'consolePosUpdateReduce': number,
}, optional={
    'externalInputEnabled': boolean,
})

ok_fields = record(required={'ok': boolean})

reply_envelope = record(required={
    'type': literal('reply'),
    'to': string,
    'msg': record(required={'type': string}),
}, name='reply')


def top_level_kinds():
    """ kinds that arrive unwrapped, in routing priority order. """
    return [
        MessageKind('position', record(required={'x': number, 'y': number, 'z': number}),
                    PositionMessage, 'position', LATEST),
        MessageKind('status', record(required={
            'mode': literal('manual', 'program', 'calibrate', 'idle'),
            'devMode': boolean,
            'inOpp': boolean,
            'calibrated': boolean,
            'stepsTodo': number,
            'stepsDone': number,
        }, optional={
            'currentProg': nullable(string),
            'isSwitchedOn': boolean,
        }), StatusMessage, 'status', LATEST),
        MessageKind('controller', record(required={
            'x': number, 'y': number, 'z': number,
            'freezeX': boolean, 'freezeY': boolean, 'slow': boolean,
        }), ControllerMessage, 'controller', LATEST),
        MessageKind('info', record(required={
            'lvl': literal('info', 'warning', 'error'),
            'message': string,
        }), InfoMessage, 'info', HISTORY),
        MessageKind('connected', record(required={'id': string}), ConnectedMessage, 'session', LATEST),
        MessageKind('progsUpdate', program_listing, AvailablePrograms, 'available_programs', LATEST),
    ]


def reply_kinds():
    """ kinds that arrive inside a reply envelope, keyed by the inner discriminant. """
    return [
        MessageKind('availablePrograms', program_listing, AvailablePrograms, 'available_programs', LATEST,
                    aliases=('WsAvailableProgramsMessage',)),
        MessageKind('loadProgram', record(required={
            'programName': string, 'program': string, 'invertZ': boolean, 'scale': number,
        }), LoadProgramReply, 'load_program', EVENT),
        MessageKind('saveProgram', record(required={'programName': string, 'ok': boolean}),
                    SaveProgramReply, 'save_program', EVENT),
        MessageKind('deleteProgram', record(required={'programName': string, 'ok': boolean}),
                    DeleteProgramReply, 'delete_program', EVENT),
        MessageKind('startProgram', record(required={'programName': string}),
                    StartProgramReply, 'start_program', EVENT),
        MessageKind('cancelProgram', ok_fields, CancelProgramReply, 'cancel_program', EVENT),
        MessageKind('systemSettings', system_settings_fields, SystemSettings, 'system_settings', LATEST),
        MessageKind('runtimeSettings', runtime_settings_fields, RuntimeSettings, 'runtime_settings', LATEST),
        MessageKind('systemSettingsSaved', ok_fields, SystemSettingsSaved, 'system_settings_saved', EVENT),
        MessageKind('runtimeSettingsSaved', ok_fields, RuntimeSettingsSaved, 'runtime_settings_saved', EVENT),
    ]


class MessageRegistry:
    """ The set of message kinds a router knows how to validate and where each one is published. """

    def __init__(self, top_level=(), replies=(), envelope=reply_envelope):
        self._top_level = []
        self._replies = {}
        self._streams = {}
        self.envelope = envelope
        for kind in top_level:
            self.register(kind)
        for kind in replies:
            self.register_reply(kind)

    def _add_stream(self, kind):
        known = self._streams.get(kind.stream)
        if known is not None and known != kind.discipline:
            raise ValueError("stream '%s' is already registered as %r, not %r" %
                             (kind.stream, known, kind.discipline))
        self._streams[kind.stream] = kind.discipline

    def register(self, kind: MessageKind):
        """ adds a top-level kind. It is tried after the kinds already registered. """
        self._add_stream(kind)
        self._top_level.append(kind)
        return kind

    def register_reply(self, kind: MessageKind):
        """ adds a kind carried in a reply envelope. """
        self._add_stream(kind)
        for discriminant in (kind.discriminant,) + kind.aliases:
            self._replies[discriminant] = kind
        return kind

    def top_level(self):
        return tuple(self._top_level)

    def reply_kind(self, discriminant):
        return self._replies.get(discriminant)

    def kinds(self):
        seen = []
        for kind in self._top_level + list(self._replies.values()):
            if kind not in seen:
                seen.append(kind)
        return tuple(seen)

    def streams(self):
        """ a mapping from stream name to its delivery discipline. """
        return dict(self._streams)

    def unwrap(self, raw):
        """
        validates a reply envelope and its payload.
        :return: the payload message, or an Invalid result when the envelope or payload is not recognized.
        """
        result = self.envelope(raw)
        if not result:
            return result
        inner = raw['msg']
        kind = self.reply_kind(inner['type'])
        if kind is None:
            return Invalid("unknown reply '%s'" % inner['type'], ('msg', 'type'))
        return kind.validate(inner, reply_to=raw['to'])


def default_registry():
    return MessageRegistry(top_level_kinds(), reply_kinds())
