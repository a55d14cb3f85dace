#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
    Copyright © 2020 Mia Herkt
    Licensed under the EUPL, Version 1.2 or - as soon as approved
    by the European Commission - subsequent versions of the EUPL
    (the "License");
    You may not use this work except in compliance with the License.
    You may obtain a copy of the license at:

        https://joinup.ec.europa.eu/software/page/eupl

    Unless required by applicable law or agreed to in writing,
    software distributed under the License is distributed on an
    "AS IS" basis, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND,
    either express or implied.
    See the License for the specific language governing permissions
    and limitations under the License.
"""

from flask import Flask, abort, make_response, request, send_from_directory, url_for, Response, render_template
from jinja2.exceptions import *
from jinja2 import ChoiceLoader, FileSystemLoader
import click
import json
import os
import sys
from mimetypes import guess_type
from pathlib import Path

import tempstore
from tempstore import Store, StoreConfig, UploadRequest, StoreError, sweep
from tempstore import ext as fext
from tempstore.purge import PurgedFile

# templates are package data of tempstore
app = Flask(__name__, instance_relative_config=True,
            template_folder=str(Path(tempstore.__file__).parent / "templates"))
app.config.update(
    PREFERRED_URL_SCHEME = "https", # nginx users: make sure to have 'uwsgi_param UWSGI_SCHEME $scheme;' in your config
    MAX_CONTENT_LENGTH = None, # derived from MAX_FILESIZE unless set
    USE_X_SENDFILE = False,
    USE_X_ACCEL_REDIRECT = True, # expect nginx by default
    STORE_PATH = "up",
    MAX_FILESIZE = 256, # MiB
    MAX_FILEAGE = 30, # days
    MIN_FILEAGE = 7, # days
    DECAY_EXP = 6,
    ID_LENGTH = 3,
    ID_TRIES_PER_LENGTH = 3,
    ID_MAX_LENGTH = 64,
    MAX_EXT_LEN = 7,
    AUTO_FILE_EXT = False,
    EXT_OVERRIDE = None, # use tempstore.config.DEFAULT_EXT_OVERRIDE
    DOWNLOAD_PATH = "{}",
    EXTERNAL_HOOK = None,
    HOOK_TIMEOUT = 60,
    LOG_PATH = None,
    ADMIN_EMAIL = None,
)

if not app.config["TESTING"]:
    app.config.from_pyfile("config.py", silent=True)
    app.config.from_prefixed_env("TEMPSHARE")
    app.jinja_loader = ChoiceLoader([
        FileSystemLoader(str(Path(app.instance_path) / "templates")),
        app.jinja_loader
    ])

    if app.config["DEBUG"]:
        app.config["USE_X_ACCEL_REDIRECT"] = False

# Leave some room for the multipart framing around the file itself
if app.config["MAX_CONTENT_LENGTH"] is None:
    app.config["MAX_CONTENT_LENGTH"] = int(app.config["MAX_FILESIZE"] * 1024 * 1024) + 64 * 1024
elif app.config["MAX_CONTENT_LENGTH"] < app.config["MAX_FILESIZE"] * 1024 * 1024:
    app.logger.warning(f"MAX_CONTENT_LENGTH ({app.config['MAX_CONTENT_LENGTH']}) set lower "
                       f"than MAX_FILESIZE ({app.config['MAX_FILESIZE']} MiB)")

def get_store() -> Store:
    return Store(StoreConfig.from_mapping(app.config))

def site_url():
    return url_for(".tempshare", _external=True)

def upload_size(f) -> int:
    stream = f.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size

def store_file(f, addr, formatted: bool):
    store = get_store()
    name = f.filename or ""
    config = store.config

    try:
        ext = fext.resolve(name, f.stream, config.auto_file_ext, config.max_ext_len,
                           config.ext_override)
        sf = store.put(UploadRequest(name, upload_size(f), f.stream, addr), ext, site_url())
    except StoreError as e:
        app.logger.info(f"upload of '{name}' from {addr} failed: {e.message}")
        return f"Error {e.code}: {e.message}\n", e.code

    if formatted:
        return render_template("uploaded.html", name=name, sf=sf, site_url=site_url())

    return sf.url + "\n"

def send_text_file(filename, content):
    return Response(content, mimetype="application/octet-stream", headers={
        "Content-Disposition" : f'attachment; filename="{filename}"',
    })

def uploader_config(kind):
    name = request.host.split(":")[0]

    if kind == "sharex":
        return send_text_file(f"{name}.sxcu", json.dumps({
            "Name" : name,
            "DestinationType" : "ImageUploader, FileUploader",
            "RequestType" : "POST",
            "RequestURL" : site_url(),
            "FileFormName" : "file",
            "ResponseType" : "Text",
        }, indent=2))
    else:
        return send_text_file(f"{name}.hupl", json.dumps({
            "name" : name,
            "type" : "http",
            "targetUrl" : site_url(),
            "fileParam" : "file",
        }, indent=2))

@app.route("/<path:path>")
def get(path):
    config = StoreConfig.from_mapping(app.config)
    name = path.split("/", 1)[0]
    id_ = name.partition(".")[0]

    if not id_.isascii() or not id_.isalpha() or not id_.islower():
        abort(404)

    fpath = config.store_path / name

    if not fpath.is_file():
        abort(404)

    if app.config["USE_X_ACCEL_REDIRECT"]:
        response = make_response()
        response.headers["Content-Type"] = guess_type(name)[0] or "application/octet-stream"
        response.headers["Content-Length"] = fpath.stat().st_size
        response.headers["X-Accel-Redirect"] = "/" + str(fpath)
        return response

    return send_from_directory(config.store_path.resolve(), name)

@app.route("/", methods=["GET", "POST"])
def tempshare():
    if request.method == "POST":
        if "file" in request.files:
            return store_file(
                request.files["file"],
                request.remote_addr,
                "formatted" in request.form
            )

        abort(400)
    elif "sharex" in request.args:
        return uploader_config("sharex")
    elif "hupl" in request.args:
        return uploader_config("hupl")
    else:
        config = StoreConfig.from_mapping(app.config)
        return render_template("index.html", store_config=config, site_url=site_url(),
                               admin_email=app.config["ADMIN_EMAIL"])

@app.route("/robots.txt")
def robots():
    return """User-agent: *
Disallow: /
"""

@app.errorhandler(400)
@app.errorhandler(404)
@app.errorhandler(405)
@app.errorhandler(413)
def ehandler(e):
    try:
        return render_template(f"{e.code}.html", request=request), e.code
    except TemplateNotFound:
        return f"Error {e.code}: {e.description}\n", e.code

def print_purged(f: PurgedFile):
    click.echo(f"deleted {f.filename}, {f.size_mib:.2f} MiB, {f.age_days:.1f} days old")

def purge_store():
    """
    Run one sweep over the store, printing what gets deleted

    Exits with status 1 if the store directory can't be read.
    """
    store = get_store()

    try:
        count, total = sweep(store, report=print_purged)
    except OSError as e:
        click.echo(e, err=True)
        click.echo(
            "\n------------------------------------\n"
            f"Encountered an error while reading {store.root}.  Double check to make\n"
            "sure the server is configured correctly and permissions are okay, then\n"
            "try again.", err=True)
        sys.exit(1)

    click.echo(f"Deleted {count} files totalling {total:.2f} MiB")

@app.cli.command("purge")
def purge():
    """
    Clean up expired files

    Deletes every file whose age exceeds the retention curve's value for its
    size.  It's recommended that server owners run this command regularly, or
    set it up on a timer.
    """
    purge_store()
