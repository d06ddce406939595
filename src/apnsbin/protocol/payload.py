""" Construction of the JSON notification payload. Only the fixed ``aps``
    dictionary is supported: alert, badge, sound, content-available, and
    category. Empty fields are left out of the encoded result.
"""

from .. import json


class Alert:
    """ A structured alert, for when a plain string is not enough. Each
        keyword argument corresponds to a key in the alert dictionary; the
        Python names use underscores where the JSON keys use hyphens.
    """

    keys = (
        ('title', 'title'),
        ('body', 'body'),
        ('title_loc_key', 'title-loc-key'),
        ('title_loc_args', 'title-loc-args'),
        ('action_loc_key', 'action-loc-key'),
        ('loc_key', 'loc-key'),
        ('loc_args', 'loc-args'),
        ('launch_image', 'launch-image'),
    )

    def __init__(self, title=None, body=None, title_loc_key=None,
                 title_loc_args=None, action_loc_key=None, loc_key=None,
                 loc_args=None, launch_image=None):

        self.title = title
        self.body = body
        self.title_loc_key = title_loc_key
        self.title_loc_args = title_loc_args
        self.action_loc_key = action_loc_key
        self.loc_key = loc_key
        self.loc_args = loc_args
        self.launch_image = launch_image


    def to_dict(self):
        alert = dict()

        for attribute,key in self.keys:
            value = getattr(self, attribute)
            if value:
                alert[key] = value

        return alert


# end of class Alert



class Payload:
    """ The notification content delivered to the device. The *alert* may be
        a string, an :class:`Alert`, or a dictionary already in the alert
        format.
    """

    def __init__(self, alert=None, badge=0, sound=None, content_available=0, category=None):

        self.alert = alert
        self.badge = badge
        self.sound = sound
        self.content_available = content_available
        self.category = category


    def __repr__(self):
        return self.encapsulate().decode()


    def to_dict(self):
        aps = dict()

        alert = self.alert
        if isinstance(alert, Alert):
            alert = alert.to_dict()

        if alert:
            aps['alert'] = alert
        if self.badge:
            aps['badge'] = self.badge
        if self.sound:
            aps['sound'] = self.sound
        if self.content_available:
            aps['content-available'] = self.content_available
        if self.category:
            aps['category'] = self.category

        return {'aps': aps}


    def encapsulate(self):
        ''' Return the JSON encoding of this payload, as bytes. The encoding
            is generated anew on every call, so a payload can be modified
            and sent again.
        '''

        return json.dumps(self.to_dict())


# end of class Payload


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
