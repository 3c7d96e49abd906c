from mangashelf.schemas.bookmark import *
from mangashelf.schemas.chapter import *
from mangashelf.schemas.comment import *
from mangashelf.schemas.library import *
from mangashelf.schemas.manga import *
from mangashelf.schemas.reaction import *
from mangashelf.schemas.reading_progress import *
from mangashelf.schemas.response import *
from mangashelf.schemas.social import *
from mangashelf.schemas.token import *
from mangashelf.schemas.user import *
