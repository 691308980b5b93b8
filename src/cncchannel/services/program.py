from cncchannel.services.feature import FeatureStreams, canned_reply

DEMO_PROGRAM = """G21 ; millimeters
G90
G0 Z5
G0 X0 Y0
G1 Z-1 F100
G1 X20 Y0 F300
G1 X20 Y20
G1 X0 Y20
G1 X0 Y0
G0 Z5
"""


class ProgramStreams(FeatureStreams):
    """
    Program catalog and the replies to program commands.

    available_programs keeps the latest catalog; the other streams deliver each reply once.
    """
    names = ('available_programs', 'load_program', 'save_program', 'delete_program', 'start_program',
             'cancel_program')

    @classmethod
    def canned(cls):
        return {
            'available_programs': (canned_reply({
                'type': 'availablePrograms',
                'progs': [{
                    'name': 'demo.ngc',
                    'path': './demo.ngc',
                    'size': len(DEMO_PROGRAM),
                    'linesOfCode': DEMO_PROGRAM.count('\n'),
                    'createDateTs': 1609459200,
                    'modifiedDateTs': 1609459200,
                }],
                'inputDir': ['.'],
            }),),
            'load_program': (canned_reply({
                'type': 'loadProgram', 'programName': 'demo.ngc', 'program': DEMO_PROGRAM, 'invertZ': False,
                'scale': 1.0,
            }),),
            'save_program': (canned_reply({'type': 'saveProgram', 'programName': 'demo.ngc', 'ok': True}),),
            'delete_program': (canned_reply({'type': 'deleteProgram', 'programName': 'demo.ngc', 'ok': True}),),
            'start_program': (canned_reply({'type': 'startProgram', 'programName': 'demo.ngc'}),),
            'cancel_program': (canned_reply({'type': 'cancelProgram', 'ok': True}),),
        }
