import io
import random
import string
import sys
import threading

import pytest

from tempstore import Store, StoreConfig, UploadRequest
from tempstore.errors import EmptyUpload, HookRejected, SizeExceeded, WriteFailure
from tempstore.uploadlog import UploadLog

class FakeRunner:
    def __init__(self, code=0, output=""):
        self.code = code
        self.output = output
        self.calls = []

    def run(self, args, env):
        self.calls.append((list(args), dict(env)))
        return self.code, self.output

def sequence(*ids):
    it = iter(ids)
    return lambda length: next(it)

def upload(data, name="hello.txt", addr="127.0.0.1"):
    return UploadRequest(name, len(data), io.BytesIO(data), addr)

@pytest.fixture
def config(tmp_path):
    return StoreConfig(store_path=tmp_path / "up", max_filesize=1)

def test_put(config):
    store = Store(config, rand=sequence("abc"))
    sf = store.put(upload(b"hello"), "txt", "https://example.com/")

    assert sf.filename == "abc.txt"
    assert sf.url == "https://example.com/abc.txt"
    assert sf.size_bytes == 5
    assert (config.store_path / "abc.txt").read_bytes() == b"hello"
    assert sf.max_age_days == pytest.approx(config.max_age_days(5 / 1024 / 1024))

def test_download_path_template(tmp_path):
    config = StoreConfig(store_path=tmp_path, download_path="f/{}?dl")
    sf = Store(config, rand=sequence("abc")).put(upload(b"x"), "", "http://h/")
    assert sf.url == "http://h/f/abc?dl"

def test_bad_download_path(tmp_path):
    with pytest.raises(ValueError):
        StoreConfig(store_path=tmp_path, download_path="f/")
    with pytest.raises(ValueError):
        StoreConfig(store_path=tmp_path, download_path="{}/{}")

def test_taken_names_are_skipped(config):
    store = Store(config, rand=sequence("abc", "abc", "xyz"))
    assert store.put(upload(b"1"), "txt").filename == "abc.txt"
    assert store.put(upload(b"2"), "txt").filename == "xyz.txt"
    assert (config.store_path / "abc.txt").read_bytes() == b"1"

def test_empty_upload(config):
    with pytest.raises(EmptyUpload):
        Store(config).put(upload(b""), "txt")
    assert not config.store_path.exists()

def test_size_exceeded(config):
    with pytest.raises(SizeExceeded):
        Store(config).put(upload(b"x" * (1024 * 1024 + 1)), "bin")
    assert not config.store_path.exists()

def test_lying_size_is_caught(config):
    store = Store(config)
    req = UploadRequest("x.bin", 10, io.BytesIO(b"x" * (1024 * 1024 + 1)), "::1")

    with pytest.raises(SizeExceeded):
        store.put(req, "bin")
    assert list(store.entries()) == []

def test_unusable_extension_is_a_write_failure(config):
    store = Store(config)
    with pytest.raises(WriteFailure):
        store.put(upload(b"hi"), "t\x00x")
    assert list(store.entries()) == []

def test_write_failure_leaves_nothing(config):
    class Broken(io.BytesIO):
        def read(self, *args):
            raise OSError("connection reset")

    store = Store(config)
    with pytest.raises(WriteFailure):
        store.put(UploadRequest("a.txt", 5, Broken(), "::1"), "txt")
    assert list(store.entries()) == []

class RacyStore(Store):
    """ Sees every name as free, like a check that loses against a concurrent upload """
    def exists(self, filename):
        return False

def test_race_is_retried(config):
    store = RacyStore(config, rand=sequence("abc", "abc", "xyz"))
    store.put(upload(b"1"), "txt")
    sf = store.put(upload(b"2"), "txt")

    assert sf.filename == "xyz.txt"
    assert (config.store_path / "abc.txt").read_bytes() == b"1"

def test_concurrent_puts_get_distinct_names(tmp_path):
    config = StoreConfig(store_path=tmp_path, id_length=1, id_tries_per_length=1)
    store = RacyStore(config, rand=lambda n: random.choice(string.ascii_lowercase))
    results = []

    def worker(i):
        results.append(store.put(upload(str(i).encode()), ""))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({sf.filename for sf in results}) == 20
    assert len(list(store.entries())) == 20

def test_hook_accepts(tmp_path):
    config = StoreConfig(store_path=tmp_path, external_hook="/usr/local/bin/check --strict")
    runner = FakeRunner()
    sf = Store(config, runner=runner, rand=sequence("abc")).put(upload(b"hi", "hi.txt", "10.0.0.1"), "txt")

    assert sf.path.is_file()
    args, env = runner.calls[0]
    assert args == ["/usr/local/bin/check", "--strict"]
    assert env == {
        "REMOTE_ADDR" : "10.0.0.1",
        "ORIGINAL_NAME" : "hi.txt",
        "STORED_FILE" : str(tmp_path / "abc.txt"),
    }

def test_hook_rejects(tmp_path):
    config = StoreConfig(store_path=tmp_path, external_hook=["check"])
    store = Store(config, runner=FakeRunner(1, "virus found"))

    with pytest.raises(HookRejected) as e:
        store.put(upload(b"hi"), "txt")

    assert e.value.message == "virus found"
    assert e.value.code == 400
    assert list(store.entries()) == []

def test_real_hook(tmp_path):
    hook = [sys.executable, "-c",
            "import os, sys; print('nope: ' + os.environ['ORIGINAL_NAME']); sys.exit(2)"]
    config = StoreConfig(store_path=tmp_path, external_hook=hook)

    with pytest.raises(HookRejected) as e:
        Store(config).put(upload(b"hi", "bad.exe"), "exe")

    assert e.value.message == "nope: bad.exe"
    assert list(tmp_path.iterdir()) == []

def test_upload_log(tmp_path):
    logfile = tmp_path / "uploads.log"
    config = StoreConfig(store_path=tmp_path / "up", log_path=logfile)
    Store(config, rand=sequence("abc")).put(upload(b"hello", "it's mine.txt", "10.0.0.2"), "txt")

    fields = logfile.read_text().rstrip("\n").split("\t")
    assert len(fields) == 5
    assert fields[1:] == ["10.0.0.2", "5", "'it'\"'\"'s mine.txt'", "abc.txt"]

def test_upload_log_format():
    line = UploadLog.format("::1", 3, "plain.txt", "abc.txt")
    assert line.endswith("\t::1\t3\tplain.txt\tabc.txt\n")

def test_entries_and_delete(config):
    store = Store(config, rand=sequence("abc", "def"))
    assert list(store.entries()) == []

    store.put(upload(b"12345"), "tar.gz")
    store.put(upload(b"1"), "")
    (config.store_path / "subdir").mkdir()

    entries = {f.filename : f for f in store.entries()}
    assert set(entries) == {"abc.tar.gz", "def"}
    assert entries["abc.tar.gz"].id == "abc"
    assert entries["abc.tar.gz"].extension == "tar.gz"
    assert entries["abc.tar.gz"].size_bytes == 5
    assert entries["def"].extension == ""

    assert store.delete("abc.tar.gz")
    assert not store.delete("abc.tar.gz")

def test_failing_runner_leaves_nothing(tmp_path):
    class Exploding:
        def run(self, args, env):
            raise RuntimeError("runner broke")

    config = StoreConfig(store_path=tmp_path, external_hook="check")
    store = Store(config, runner=Exploding())

    with pytest.raises(RuntimeError):
        store.put(upload(b"hi"), "txt")
    assert list(store.entries()) == []

def test_blank_hook_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        StoreConfig(store_path=tmp_path, external_hook="   ")
    with pytest.raises(ValueError):
        StoreConfig(store_path=tmp_path, external_hook=[])

    assert StoreConfig(store_path=tmp_path, external_hook="").external_hook == ""

def test_nul_in_original_name_reaches_hook_cleaned(tmp_path):
    runner = FakeRunner()
    config = StoreConfig(store_path=tmp_path, external_hook="check")
    Store(config, runner=runner).put(upload(b"hi", "a\x00b.txt"), "txt")

    assert runner.calls[0][1]["ORIGINAL_NAME"] == "ab.txt"
