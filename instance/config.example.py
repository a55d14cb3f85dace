


 ################################################################################
 # This is a configuration file for TempShare                                   #
 #                                                                              #
 # Copy it to instance/config.py.  The default values here are set to          #
 # generally reasonable defaults, but a couple of things need your attention.  #
 # Specifically, make sure STORE_PATH points somewhere writable.  You'll also  #
 # probably want to configure USE_X_SENDFILE and USE_X_ACCEL_REDIRECT to match #
 # your webserver.                                                              #
 #                                                                              #
 # Every key can also be set from the environment with a TEMPSHARE_ prefix,    #
 # e.g. TEMPSHARE_MAX_FILESIZE=512                                              #
 ################################################################################



# The directory that TempShare should store uploaded files in
#
# Relative paths are resolved relative to the working directory that TempShare
# is being run from.  The directory is created on the first upload.
STORE_PATH = "up"


# The maximum allowable upload size, in MiB
#
# Keep in mind that this affects the expiration of files as well!  The closer a
# file is to the max size, the less time it will last before being deleted.
MAX_FILESIZE = 256


# Minimum and maximum age of files, in days
#
# Every file is kept for at least MIN_FILEAGE days.  Small files are kept for up
# to MAX_FILEAGE days; the closer a file is to MAX_FILESIZE, the closer its
# lifetime gets to MIN_FILEAGE.
MIN_FILEAGE = 7
MAX_FILEAGE = 30


# How sharply retention drops as files approach MAX_FILESIZE
#
# The maximum age of a file is
#
#   MIN_FILEAGE + (MAX_FILEAGE - MIN_FILEAGE) * (1 - size / MAX_FILESIZE) ** DECAY_EXP
#
# Higher values make retention fall off faster: with the default of 6, a file at
# half of MAX_FILESIZE is kept for about MIN_FILEAGE + 0.36 days.
DECAY_EXP = 6


# Length of the random file names
#
# Names are made of lowercase letters.  If ID_TRIES_PER_LENGTH random names of
# ID_LENGTH characters are all taken, we try one character longer, up to
# ID_MAX_LENGTH.
ID_LENGTH = 3
ID_TRIES_PER_LENGTH = 3
ID_MAX_LENGTH = 64


# The maximum length of a file extension
#
# If the extension a user provides is longer, it gets truncated.  So if a user
# uploads "myfile.withareallongext" and MAX_EXT_LEN is 7, the extension that we
# keep is ".withare".  Compound archive extensions like "tar.gz" count as one.
MAX_EXT_LEN = 7


# Detect an extension for files uploaded without one
#
# Uses libmagic (python-magic) to look at the file contents.  Text files that
# don't match anything more specific get ".txt".
AUTO_FILE_EXT = False


# A map of MIME types to extensions, consulted before libmagic's own guess
#
# Only used when AUTO_FILE_EXT is on.  None means the built-in table.
EXT_OVERRIDE = {
    "audio/flac" : "flac",
    "image/gif" : "gif",
    "image/jpeg" : "jpg",
    "image/png" : "png",
    "image/svg+xml" : "svg",
    "video/webm" : "webm",
    "video/x-matroska" : "mkv",
    "text/plain" : "txt",
    "text/x-diff" : "diff",
}


# The path part of the download URL
#
# {} is replaced with the stored file name.  If your webserver serves
# STORE_PATH directly under e.g. /f/, set this to "f/{}".
DOWNLOAD_PATH = "{}"


# External program to call for each upload
#
# The program gets REMOTE_ADDR, ORIGINAL_NAME and STORED_FILE in its
# environment.  If it exits with a non-zero status, the upload is deleted and
# the program's output is shown to the uploader as the error message.  Either a
# command line string or a list of arguments.  None disables the hook.
EXTERNAL_HOOK = None


# How long the external hook may run, in seconds
#
# Hooks that take longer are killed, and the upload is rejected.
HOOK_TIMEOUT = 60


# Path to log uploads and resulting links to
#
# Each upload adds one tab-separated line: time, address, size, original name,
# stored name.  None disables the log.
LOG_PATH = None


# Use the X-SENDFILE header to speed up serving files w/ compatible webservers
USE_X_SENDFILE = False


# Use X-Accel-Redirect to speed up serving files w/ compatible webservers
#
# nginx and Caddy use the X-Accel-Redirect header to hand off sending the file.
# If your webserver serves STORE_PATH itself, this doesn't matter.
USE_X_ACCEL_REDIRECT = True # expect nginx by default


# Address for abuse reports and other inquiries, shown on the front page
ADMIN_EMAIL = None


 #################################################################################
 # CONGRATULATIONS!  You made it all the way through!                            #
 # If you want to go even further to customize your instance, put templates in   #
 # instance/templates/ to override the landing page, upload result page, or to   #
 # add error pages like 404.html.                                                #
 #################################################################################
