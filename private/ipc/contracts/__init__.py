from .testcommon import (
    TestCommonMetaData,
    TestCommonContract,
    TestCommonFactory,
    States,
    new_test_common,
    deploy_test_common,
)

__all__ = [
    'TestCommonMetaData',
    'TestCommonContract',
    'TestCommonFactory',
    'States',
    'new_test_common',
    'deploy_test_common'
]
