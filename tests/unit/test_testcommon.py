import unittest
from unittest.mock import patch, MagicMock

from eth_account import Account
from web3 import Web3

from private.ipc.contracts import testcommon
from sdk.config import SDKError
from tests.fixtures.common_fixtures import (
    UPDATER_KEY, HOME_ADDRESS, make_mock_web3, make_receipt, root,
)

ABI = testcommon.TestCommonMetaData.ABI
BIN = testcommon.TestCommonMetaData.BIN


def _entries(kind):
    return {entry["name"]: entry for entry in ABI if entry["type"] == kind}


def _signature(entry):
    return f"{entry['name']}({','.join(i['type'] for i in entry['inputs'])})"


class TestTestCommonABI(unittest.TestCase):
    """The exported ABI must describe the deployed bytecode exactly."""

    def test_function_names(self):
        self.assertEqual(set(_entries("function")), {
            "current", "doubleUpdate", "homeDomainHash", "localDomain",
            "queueContains", "queueEnd", "queueLength", "setUpdater",
            "state", "testIsUpdaterSignature", "updater",
        })

    def test_constructor_inputs(self):
        (constructor,) = [e for e in ABI if e["type"] == "constructor"]
        self.assertEqual(
            [(i["name"], i["type"]) for i in constructor["inputs"]],
            [("_localDomain", "uint32"), ("_updater", "address")],
        )

    def test_events(self):
        events = _entries("event")
        self.assertEqual(set(events), {"Update", "DoubleUpdate"})
        self.assertEqual(_signature(events["Update"]), "Update(uint32,bytes32,bytes32,bytes)")
        self.assertEqual(
            [i["indexed"] for i in events["Update"]["inputs"]],
            [True, True, True, False],
        )
        self.assertEqual(
            _signature(events["DoubleUpdate"]),
            "DoubleUpdate(bytes32,bytes32[2],bytes,bytes)",
        )

    def test_mutability(self):
        functions = _entries("function")
        writes = {name for name, f in functions.items() if f["stateMutability"] == "nonpayable"}
        self.assertEqual(writes, {"doubleUpdate", "setUpdater"})

    def test_bytecode_is_hex(self):
        self.assertTrue(BIN.startswith("0x60a06040"))
        self.assertGreater(len(bytes.fromhex(BIN[2:])), 1000)

    def test_function_selectors_in_bytecode(self):
        for name, entry in _entries("function").items():
            with self.subTest(name):
                selector = Web3.to_hex(Web3.keccak(text=_signature(entry))[:4])[2:]
                self.assertIn(selector, BIN)

    def test_double_update_topic_in_bytecode(self):
        topic = Web3.to_hex(Web3.keccak(text="DoubleUpdate(bytes32,bytes32[2],bytes,bytes)"))[2:]
        self.assertIn(topic, BIN)

    def test_revert_strings_in_bytecode(self):
        self.assertIn("failed state".encode().hex(), BIN)
        self.assertIn("OPTICS".encode().hex(), BIN)

    def test_state_enum(self):
        self.assertEqual(testcommon.States(2), testcommon.States.FAILED)
        self.assertEqual(int(testcommon.States.ACTIVE), 1)


class TestTestCommonFactory(unittest.TestCase):

    def setUp(self):
        self.w3 = make_mock_web3(nonce=7)
        self.account = Account.from_key(UPDATER_KEY)
        self.factory = testcommon.TestCommonFactory(self.w3, self.account)

    def test_static_accessors(self):
        self.assertIs(testcommon.TestCommonFactory.abi, ABI)
        self.assertEqual(testcommon.TestCommonFactory.bytecode, BIN)

    def test_create_interface(self):
        interface = testcommon.TestCommonFactory.create_interface(Web3())
        self.assertEqual(interface.abi, ABI)

    def test_get_deploy_transaction(self):
        built = {"data": "0x60a0", "nonce": 7}
        constructor = self.w3.eth.contract.return_value.constructor
        constructor.return_value.build_transaction.return_value = built

        tx = self.factory.get_deploy_transaction(1000, HOME_ADDRESS.lower(), {"gas": 123})

        self.assertIs(tx, built)
        self.w3.eth.contract.assert_called_once_with(abi=ABI, bytecode=BIN)
        constructor.assert_called_once_with(1000, HOME_ADDRESS)
        constructor.return_value.build_transaction.assert_called_once_with(
            {"from": self.account.address, "nonce": 7, "gas": 123}
        )
        self.w3.eth.get_transaction_count.assert_called_once_with(self.account.address, 'pending')

    def test_get_deploy_transaction_without_signer(self):
        factory = testcommon.TestCommonFactory(self.w3)
        factory.get_deploy_transaction(1, HOME_ADDRESS)
        build = self.w3.eth.contract.return_value.constructor.return_value.build_transaction
        build.assert_called_once_with({})
        self.w3.eth.get_transaction_count.assert_not_called()

    def test_invalid_constructor_arguments(self):
        for domain in (-1, 2 ** 32, True, "1000"):
            with self.subTest(domain=domain):
                with self.assertRaises(ValueError):
                    self.factory.get_deploy_transaction(domain, HOME_ADDRESS)
        with self.assertRaises(ValueError):
            self.factory.get_deploy_transaction(1000, "0x1234")
        self.w3.eth.contract.assert_not_called()

    def test_deploy_requires_signer(self):
        with self.assertRaises(SDKError):
            testcommon.TestCommonFactory(self.w3).deploy(1000, HOME_ADDRESS)

    @patch("private.ipc.contracts.testcommon.dispatch_transaction")
    def test_deploy(self, mock_dispatch):
        receipt = make_receipt(contract_address=HOME_ADDRESS)
        mock_dispatch.return_value = receipt

        contract = self.factory.deploy(1000, self.account.address)

        self.assertIsInstance(contract, testcommon.TestCommonContract)
        self.assertEqual(contract.address, HOME_ADDRESS)
        self.assertIs(contract.deploy_receipt, receipt)
        self.assertIs(contract.account, self.account)
        args = mock_dispatch.call_args[0]
        self.assertIs(args[0], self.w3)
        self.assertIs(args[1], self.account)

    @patch("private.ipc.contracts.testcommon.dispatch_transaction")
    def test_deploy_test_common_helper(self, mock_dispatch):
        mock_dispatch.return_value = make_receipt(tx_hash=b"\x12" * 32, contract_address=HOME_ADDRESS)

        address, tx_hash = testcommon.deploy_test_common(self.w3, self.account, 1000, self.account.address)

        self.assertEqual(address, HOME_ADDRESS)
        self.assertEqual(tx_hash, "0x" + "12" * 32)

    def test_attach_and_connect(self):
        contract = self.factory.attach(HOME_ADDRESS.lower())
        self.assertEqual(contract.address, HOME_ADDRESS)
        self.assertIs(contract.account, self.account)
        self.w3.eth.contract.assert_called_with(address=HOME_ADDRESS, abi=ABI)

        other = Account.create()
        connected = self.factory.connect(other)
        self.assertIsNot(connected, self.factory)
        self.assertIs(connected.account, other)
        self.assertIs(self.factory.account, self.account)

    @patch("private.ipc.contracts.testcommon.dispatch_transaction")
    def test_tx_timeout_follows_bindings(self, mock_dispatch):
        mock_dispatch.return_value = make_receipt(contract_address=HOME_ADDRESS)
        factory = testcommon.TestCommonFactory(self.w3, self.account, tx_timeout=30)

        contract = factory.connect(Account.create()).deploy(1000, self.account.address)

        self.assertEqual(mock_dispatch.call_args.kwargs["timeout"], 30)
        self.assertEqual(contract.tx_timeout, 30)
        self.assertEqual(contract.connect(self.account).tx_timeout, 30)
        self.assertEqual(factory.attach(HOME_ADDRESS).tx_timeout, 30)
        self.assertEqual(testcommon.new_test_common(self.w3, HOME_ADDRESS, tx_timeout=5).tx_timeout, 5)

    def test_new_test_common(self):
        contract = testcommon.new_test_common(self.w3, HOME_ADDRESS)
        self.assertEqual(contract.address, HOME_ADDRESS)
        self.assertIsNone(contract.account)


class TestTestCommonContract(unittest.TestCase):

    def setUp(self):
        self.w3 = make_mock_web3(nonce=3)
        self.account = Account.from_key(UPDATER_KEY)
        self.contract = testcommon.TestCommonContract(self.w3, HOME_ADDRESS, self.account)
        self.functions = self.contract.contract.functions

    def test_view_calls(self):
        self.functions.state.return_value.call.return_value = 2
        self.functions.localDomain.return_value.call.return_value = 1000
        self.functions.queueLength.return_value.call.return_value = 4
        self.functions.current.return_value.call.return_value = root(1)

        self.assertEqual(self.contract.state(), testcommon.States.FAILED)
        self.assertEqual(self.contract.local_domain(), 1000)
        self.assertEqual(self.contract.queue_length(), 4)
        self.assertEqual(self.contract.current(), root(1))

    def test_queue_contains_accepts_hex(self):
        self.functions.queueContains.return_value.call.return_value = True
        self.assertTrue(self.contract.queue_contains("0x" + "01" * 32))
        self.functions.queueContains.assert_called_once_with(root(1))

    def test_queue_contains_rejects_short_root(self):
        with self.assertRaises(ValueError):
            self.contract.queue_contains(b"\x01" * 31)

    def test_is_updater_signature(self):
        self.functions.testIsUpdaterSignature.return_value.call.return_value = False
        self.assertFalse(self.contract.test_is_updater_signature(root(0), root(1), b"\x00" * 65))
        self.functions.testIsUpdaterSignature.assert_called_once_with(root(0), root(1), b"\x00" * 65)

    def test_double_update_requires_signer(self):
        unsigned = testcommon.TestCommonContract(self.w3, HOME_ADDRESS)
        with self.assertRaises(SDKError):
            unsigned.double_update(root(0), [root(1), root(2)], b"a", b"b")

    def test_double_update_needs_two_roots(self):
        with self.assertRaises(ValueError):
            self.contract.double_update(root(0), [root(1)], b"a", b"b")

    @patch("private.ipc.contracts.testcommon.dispatch_transaction")
    def test_double_update(self, mock_dispatch):
        mock_dispatch.return_value = make_receipt()
        built = {"to": HOME_ADDRESS, "data": "0x19d9d21a"}
        self.functions.doubleUpdate.return_value.build_transaction.return_value = built

        receipt = self.contract.double_update(root(0), [root(1), "0x" + "02" * 32], b"a", b"b")

        self.assertEqual(receipt["status"], 1)
        self.functions.doubleUpdate.assert_called_once_with(root(0), [root(1), root(2)], b"a", b"b")
        self.functions.doubleUpdate.return_value.build_transaction.assert_called_once_with(
            {"from": self.account.address, "nonce": 3}
        )
        mock_dispatch.assert_called_once_with(self.w3, self.account, built, timeout=900)

    @patch("private.ipc.contracts.testcommon.dispatch_transaction")
    def test_set_updater(self, mock_dispatch):
        new_updater = Account.create().address
        self.contract.set_updater(new_updater.lower(), {"gas": 100000})
        self.functions.setUpdater.assert_called_once_with(new_updater)
        self.functions.setUpdater.return_value.build_transaction.assert_called_once_with(
            {"from": self.account.address, "nonce": 3, "gas": 100000}
        )
        self.assertTrue(mock_dispatch.called)

    def test_set_updater_invalid_address(self):
        with self.assertRaises(ValueError):
            self.contract.set_updater("not-an-address")

    def test_connect(self):
        other = Account.create()
        connected = self.contract.connect(other)
        self.assertEqual(connected.address, self.contract.address)
        self.assertIs(connected.account, other)

    def test_get_update_events_filters(self):
        events = self.contract.contract.events.Update.get_logs
        events.return_value = []

        self.contract.get_update_events(10, 20, home_domain=1000, old_root=root(1))
        events.assert_called_once_with(
            from_block=10, to_block=20,
            argument_filters={"homeDomain": 1000, "oldRoot": root(1)},
        )

        events.reset_mock()
        self.contract.get_update_events()
        events.assert_called_once_with(from_block=0, to_block='latest', argument_filters=None)

    def test_get_double_update_events(self):
        logs = [MagicMock()]
        self.contract.contract.events.DoubleUpdate.get_logs.return_value = logs
        self.assertIs(self.contract.get_double_update_events(5), logs)


if __name__ == '__main__':
    unittest.main()
