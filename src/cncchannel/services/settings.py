from cncchannel.services.feature import FeatureStreams, canned_reply


def _stepper_motor(pull_gpio, dir_gpio, invert_dir, end_left_gpio, end_right_gpio):
    return {
        'driverSettings': {'Stepper': {
            'pull_gpio': pull_gpio,
            'dir_gpio': dir_gpio,
            'invert_dir': invert_dir,
            'end_left_gpio': end_left_gpio,
            'end_right_gpio': end_right_gpio,
        }},
        'maxStepSpeed': 200,
        'stepSize': 0.004,
        'acceleration': 1.0,
        'deceleration': 1.0,
        'freeStepSpeed': 20.0,
        'accelerationTimeScale': 2.0,
    }


class SettingsStreams(FeatureStreams):
    """
    System and runtime settings.

    system_settings and runtime_settings keep the latest settings received. The *_saved streams
    deliver the acknowledgement of each save once.
    """
    names = ('system_settings', 'runtime_settings', 'system_settings_saved', 'runtime_settings_saved')

    @classmethod
    def canned(cls):
        return {
            'system_settings': (canned_reply({
                'type': 'systemSettings',
                'devMode': True,
                'motorX': _stepper_motor(18, 27, False, 21, 20),
                'motorY': _stepper_motor(22, 23, False, 19, 26),
                'motorZ': _stepper_motor(25, 24, True, 5, 6),
                'calibrateZGpio': 16,
                'onOffGpio': 13,
                'switchOnOffDelay': 3.5,
            }),),
            'runtime_settings': (canned_reply({
                'type': 'runtimeSettings',
                'inputDir': ['.'],
                'inputUpdateReduce': 10,
                'defaultSpeed': 360.0,
                'rapidSpeed': 720.0,
                'scale': 1.0,
                'invertZ': False,
                'showConsoleOutput': True,
                'consolePosUpdateReduce': 5,
                'externalInputEnabled': False,
            }),),
            'system_settings_saved': (canned_reply({'type': 'systemSettingsSaved', 'ok': True}),),
            'runtime_settings_saved': (canned_reply({'type': 'runtimeSettingsSaved', 'ok': True}),),
        }
