from cncchannel.services.feature import FeatureStreams, canned_top_level


class TelemetryStreams(FeatureStreams):
    """
    Machine telemetry.

    - position: latest position of the tool
    - status: latest machine status
    - info: the last 25 info, warning and error messages
    - session: the id the controller assigned to this connection
    """
    names = ('position', 'status', 'info', 'session')

    @classmethod
    def canned(cls):
        return {
            'position': (canned_top_level({'type': 'position', 'x': 10.1, 'y': -15.6, 'z': 42.1}),),
            'status': (canned_top_level({
                'type': 'status',
                'mode': 'manual',
                'devMode': False,
                'inOpp': False,
                'currentProg': None,
                'calibrated': False,
                'stepsTodo': 1,
                'stepsDone': 0,
                'isSwitchedOn': False,
            }),),
            'info': (canned_top_level({'type': 'info', 'lvl': 'warning', 'message': 'testMessage'}),),
            'session': (canned_top_level({'type': 'connected', 'id': 'mock'}),),
        }
