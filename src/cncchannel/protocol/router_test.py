import json
import unittest
from unittest.mock import Mock

from hamcrest import assert_that, is_, is_not, instance_of, calling, raises, has_length, equal_to

from cncchannel.protocol.router import ChannelRouter
from cncchannel.schema.messages import PositionMessage, StartProgramReply, AvailablePrograms
from cncchannel.schema.messages_test import STATUS


def position(x, y, z):
    return json.dumps({'type': 'position', 'x': x, 'y': y, 'z': z})


class ChannelRouterTest(unittest.TestCase):

    def setUp(self):
        self.sut = ChannelRouter()
        self.observers = {}
        for name in self.sut.stream_names():
            observer = self.observers[name] = Mock()
            self.sut.stream(name).subscribe(observer)

    def emitted(self):
        return {name: observer.call_count for name, observer in self.observers.items() if observer.call_count}

    def test_routes_to_exactly_one_stream(self):
        message = self.sut.route(position(10.1, -15.6, 42.1))
        assert_that(message, is_(instance_of(PositionMessage)))
        assert_that(self.emitted(), is_({'position': 1}))
        self.observers['position'].assert_called_once_with(message)

    def test_latest_position_wins(self):
        self.sut.route(position(10.1, -15.6, 42.1))
        self.sut.route(position(11.0, -14.0, 40.0))
        assert_that(self.sut.subject('position').value.as_dict(),
                    is_({'type': 'position', 'x': 11.0, 'y': -14.0, 'z': 40.0}))
        late = Mock()
        self.sut.stream('position').subscribe(late)
        assert_that(late.call_args[0][0].x, is_(11.0))

    def test_start_program_round_trip(self):
        frame = json.dumps({'type': 'reply', 'to': 'x', 'msg': {'type': 'startProgram', 'programName': 'demo.ngc'}})
        self.sut.route(frame)
        assert_that(self.emitted(), is_({'start_program': 1}))
        reply = self.observers['start_program'].call_args[0][0]
        assert_that(reply, is_(instance_of(StartProgramReply)))
        assert_that(reply.programName, is_('demo.ngc'))

    def test_reply_with_unexpected_to_is_still_delivered(self):
        self.sut.route(json.dumps({'type': 'reply', 'to': 'someone-else', 'msg': {'type': 'cancelProgram',
                                                                                  'ok': False}}))
        assert_that(self.emitted(), is_({'cancel_program': 1}))

    def test_program_listing_from_update_and_reply_share_stream(self):
        listing = {'progs': [{'name': 'a.ngc', 'path': './a.ngc', 'size': 10, 'linesOfCode': 2,
                              'createDateTs': 1, 'modifiedDateTs': 2}], 'inputDir': ['.']}
        self.sut.route(json.dumps(dict(listing, type='progsUpdate')))
        self.sut.route(json.dumps({'type': 'reply', 'to': 'x', 'msg': dict(listing, type='availablePrograms')}))
        assert_that(self.emitted(), is_({'available_programs': 2}))
        assert_that(self.sut.subject('available_programs').value, is_(instance_of(AvailablePrograms)))

    def test_status(self):
        self.sut.route(json.dumps(STATUS))
        assert_that(self.emitted(), is_({'status': 1}))

    def test_invalid_frames_are_dropped(self):
        frames = [
            'not json',
            b'\xff\xfe',
            '[1, 2]',
            'null',
            json.dumps({'type': 'position', 'x': 1, 'y': 2}),
            json.dumps({'type': 'position', 'x': '1', 'y': 2, 'z': 3}),
            json.dumps({'type': 'teleport', 'x': 1}),
            json.dumps({'type': 'reply', 'to': 'x', 'msg': {'type': 'reboot'}}),
            json.dumps({'type': 'reply', 'msg': {'type': 'cancelProgram', 'ok': True}}),
            json.dumps({'type': 'reply', 'to': 'x', 'msg': {'type': 'saveProgram', 'ok': True}}),
        ]
        for frame in frames:
            assert_that(self.sut.route(frame), is_(None))
        assert_that(self.emitted(), is_({}))

    def test_non_standard_constants_are_dropped(self):
        for constant in ('NaN', 'Infinity', '-Infinity'):
            frame = '{"type": "position", "x": %s, "y": 0, "z": 0}' % constant
            assert_that(self.sut.route(frame), is_(None))
        assert_that(self.emitted(), is_({}))

    def test_deeply_nested_frames_are_dropped(self):
        assert_that(self.sut.route('[' * 100000), is_(None))
        assert_that(self.sut.route('{"a": ' * 100000), is_(None))
        assert_that(self.emitted(), is_({}))

    def test_deeply_nested_extra_field_does_not_raise(self):
        for depth in (600, 900, 5000):
            frame = '{"type": "position", "x": 1, "y": 2, "z": 3, "extra": ' + '[' * depth + ']' * depth + '}'
            self.sut.route(frame)
        assert_that(self.sut.route(position(4, 5, 6)), is_(instance_of(PositionMessage)))
        assert_that(self.sut.subject('position').value.x, is_(4))

    def test_huge_frame_is_routed(self):
        frame = json.dumps({'type': 'info', 'lvl': 'info', 'message': 'x' * 1000000})
        assert_that(self.sut.route(frame), is_not(None))

    def test_subscribers_can_not_alter_shared_message(self):
        listing = {'type': 'progsUpdate', 'progs': [], 'inputDir': ['.']}
        self.sut.route(json.dumps(listing))
        self.sut.stream('available_programs').subscribe(lambda m: m.progs.append('tampered'))
        late = []
        self.sut.stream('available_programs').subscribe(late.append)
        assert_that(late[0].progs, is_([]))

    def test_bytes_frames_are_parsed(self):
        assert_that(self.sut.route(position(1, 2, 3).encode()), is_(instance_of(PositionMessage)))

    def test_info_history_bounded(self):
        for i in range(30):
            self.sut.route(json.dumps({'type': 'info', 'lvl': 'info', 'message': 'm%d' % i}))
        received = []
        self.sut.stream('info').subscribe(received.append)
        assert_that(received, has_length(25))
        assert_that([m.message for m in received], is_(['m%d' % i for i in range(5, 30)]))

    def test_event_streams_do_not_replay(self):
        self.sut.route(json.dumps({'type': 'reply', 'to': 'x', 'msg': {'type': 'saveProgram', 'programName': 'a',
                                                                        'ok': True}}))
        late = Mock()
        self.sut.stream('save_program').subscribe(late)
        late.assert_not_called()

    def test_close_discards_streams(self):
        self.sut.close()
        assert_that(self.sut.route(position(1, 2, 3)), is_(None))
        assert_that(self.emitted(), is_(equal_to({})))

    def test_unknown_stream(self):
        assert_that(calling(self.sut.stream).with_args('spindle'), raises(KeyError))
