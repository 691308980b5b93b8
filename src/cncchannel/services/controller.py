from cncchannel.services.feature import FeatureStreams, canned_top_level


class ControllerStreams(FeatureStreams):
    """ Jog controller state: the axis values, which axes are frozen and slow mode. """
    names = ('controller',)

    @classmethod
    def canned(cls):
        return {
            'controller': (canned_top_level({
                'type': 'controller', 'x': 0, 'y': 0, 'z': 0, 'freezeX': False, 'freezeY': False, 'slow': False,
            }),),
        }
