import pytest

from papervault.blockchain import ContractStore, load_abi
from papervault.errors import StoreUnavailable


class _Call:
    def __init__(self, fn):
        self.fn = fn

    def call(self):
        return self.fn()


class _Functions:
    def __init__(self, data, available=True):
        self.data = data
        self.available = available

    def isAvailable(self):
        return _Call(lambda: self.available)

    def getData(self, key):
        def _get():
            if key == "boom":
                raise ConnectionError("rpc down")
            return self.data.get(key, b"")
        return _Call(_get)


class _Contract:
    address = "0x0000000000000000000000000000000000000001"

    def __init__(self, data, available=True):
        self.functions = _Functions(data, available)


def test_contract_store_reads():
    store = ContractStore(web3=object(), contract=_Contract({"paper_keys": b'["a"]'}), private_key="")
    assert store.is_available()
    assert store.get_data("paper_keys") == b'["a"]'
    assert store.get_data("missing") == b""
    assert store.address == _Contract.address


def test_contract_store_read_failure_is_unavailable():
    store = ContractStore(web3=object(), contract=_Contract({}), private_key="")
    with pytest.raises(StoreUnavailable):
        store.get_data("boom")


def test_contract_store_without_key_is_read_only():
    store = ContractStore(web3=object(), contract=_Contract({}, available=False), private_key="")
    assert not store.is_available()
    with pytest.raises(StoreUnavailable):
        store.set_data("k", b"v")


def test_load_abi_unwraps_artifacts(tmp_path):
    p = tmp_path / "Store.json"
    p.write_text('{"abi": [{"type": "function", "name": "getData"}]}', encoding="utf-8")
    assert load_abi(str(p), "") == [{"type": "function", "name": "getData"}]
    assert load_abi("", '[{"type": "function", "name": "setData"}]')[0]["name"] == "setData"
    with pytest.raises(RuntimeError):
        load_abi(str(tmp_path / "nope.json"), "")


def test_contract_store_missing_abi_function_is_unavailable(monkeypatch):
    import papervault.blockchain as blockchain
    from papervault.sync import RegistrySync

    monkeypatch.setattr(blockchain, "FN_GET_DATA", "getBlob")
    monkeypatch.setattr(blockchain, "FN_SET_DATA", "putBlob")
    store = ContractStore(web3=object(), contract=_Contract({"paper_keys": b'["a"]'}),
                          private_key="0x" + "11" * 32)
    with pytest.raises(StoreUnavailable):
        store.get_data("paper_keys")
    with pytest.raises(StoreUnavailable):
        store.set_data("k", b"v")
    assert RegistrySync(store).list_papers() == []
